"""Mock transport for testing and prototyping"""

from __future__ import annotations

import json
from collections import deque
from http import HTTPStatus
from typing import Any, Dict, Iterable, List, Optional, Union

import requests
from requests.adapters import BaseAdapter

Outcome = Union[int, requests.Response, BaseException, None]


def build_response(
    status_code: int,
    body: Any = b"",
    request: Optional[requests.PreparedRequest] = None,
    headers: Optional[Dict[str, str]] = None,
) -> requests.Response:
    """Build an in-memory response

    Args:
        status_code: HTTP status code
        body: bytes, str, or a JSON-serializable object
        request: Request the response answers
        headers: Extra response headers

    Returns:
        requests.Response with its content already loaded
    """
    response = requests.Response()
    response.status_code = status_code
    try:
        response.reason = HTTPStatus(status_code).phrase
    except ValueError:
        response.reason = ""
    if isinstance(body, bytes):
        content = body
    elif isinstance(body, str):
        content = body.encode("utf-8")
    else:
        content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    response._content = content  # type: ignore[attr-defined]
    response.encoding = "utf-8"
    if headers:
        response.headers.update(headers)
    if request is not None:
        response.request = request
        response.url = request.url
    return response


class MockTransport(BaseAdapter):
    """Transport that replays scripted outcomes instead of touching the network

    Each call consumes the next outcome: an int becomes a response with that
    status, a ``requests.Response`` is returned as is, an exception is raised
    and None is returned verbatim. The last outcome repeats once the script
    runs out.
    """

    def __init__(self, outcomes: Iterable[Outcome] = (200,)):
        super().__init__()
        self._outcomes = deque(outcomes)
        if not self._outcomes:
            raise ValueError("outcomes must not be empty")
        self.requests: List[requests.PreparedRequest] = []
        self.send_kwargs: List[Dict[str, Any]] = []
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        self.send_kwargs.append(
            {"stream": stream, "timeout": timeout, "verify": verify, "cert": cert, "proxies": proxies}
        )
        outcome = self._outcomes.popleft() if len(self._outcomes) > 1 else self._outcomes[0]

        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, int):
            return build_response(outcome, request=request)
        if isinstance(outcome, requests.Response) and outcome.request is None:
            outcome.request = request
            outcome.url = request.url
        return outcome

    def close(self) -> None:
        self.closed = True
