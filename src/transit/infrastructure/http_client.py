"""HTTP client handle (requests session + decorated transport chain).

We keep client assembly centralized so every caller gets the same stacking
order, timeout and trust settings.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Union

import requests
from requests.adapters import BaseAdapter

from transit.domain.config.app import ClientConfig
from transit.domain.errors import CallTimedOutError
from transit.domain.models.call_context import call_scope
from transit.infrastructure.tls import TrustStore
from transit.infrastructure.transport.factory import TransportFactory

logger = logging.getLogger(__name__)


class HttpClient:
    """Client that sends requests through a transport chain

    Each ``execute`` is one logical call: it runs under a deadline of
    ``timeout`` seconds covering every attempt and every retry delay, and
    yields exactly one response or raises exactly one error.
    """

    def __init__(
        self,
        transport: BaseAdapter,
        *,
        timeout: Optional[float] = 30.0,
        connect_timeout: Optional[float] = None,
        verify: Union[bool, str] = True,
        headers: Optional[Dict[str, str]] = None,
        trust_store: Optional[TrustStore] = None,
    ):
        """Initialize client

        Args:
            transport: Outermost transport of the chain (owned by the client)
            timeout: Overall per-call deadline in seconds (None = unbounded)
            connect_timeout: Cap on connection setup per attempt, so a stalled
                connect cannot use up the whole deadline (None = no separate cap)
            verify: requests ``verify`` value (bool or CA bundle path)
            headers: Default headers for every request
            trust_store: Trust store to release on close
        """
        self.transport = transport
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.verify = verify
        self._trust_store = trust_store
        self._session = requests.Session()
        self._session.mount("http://", transport)
        self._session.mount("https://", transport)
        if headers:
            self._session.headers.update(headers)

    def execute(
        self,
        request: Union[requests.Request, requests.PreparedRequest],
        *,
        cancel: Optional[threading.Event] = None,
        stream: bool = False,
    ) -> requests.Response:
        """Execute one logical call

        Args:
            request: Request to send (prepared with the session defaults if not prepared yet)
            cancel: Event the caller sets to abandon the call
            stream: Leave the response body unread

        Returns:
            The response of the last attempt

        Raises:
            requests.exceptions.RequestException: If the last attempt failed at the transport level
            CallCancelledError: If ``cancel`` fired before the call completed
            CallTimedOutError: If the deadline elapsed before the call completed
        """
        if isinstance(request, requests.Request):
            prepared = self._session.prepare_request(request)
        else:
            prepared = request

        settings = self._session.merge_environment_settings(prepared.url, {}, stream, self.verify, None)

        with call_scope(self.timeout, cancel) as context:
            context.raise_if_done()
            try:
                return self._session.send(prepared, timeout=self._socket_timeout(), **settings)
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                # a read timeout while loading the body surfaces as ConnectionError
                if context.expired():
                    raise CallTimedOutError("Call deadline exceeded") from e
                raise

    def _socket_timeout(self):
        if self.connect_timeout is None:
            return self.timeout
        return (self.connect_timeout, self.timeout)

    def request(
        self,
        method: str,
        url: str,
        *,
        cancel: Optional[threading.Event] = None,
        stream: bool = False,
        **kwargs: Any,
    ) -> requests.Response:
        """Build and execute a request

        Args:
            method: HTTP method
            url: Absolute URL
            cancel: Event the caller sets to abandon the call
            stream: Leave the response body unread
            **kwargs: ``requests.Request`` arguments (headers, params, data, json, ...)

        Returns:
            Response of the logical call
        """
        return self.execute(requests.Request(method.upper(), url, **kwargs), cancel=cancel, stream=stream)

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> requests.Response:
        return self.request("POST", url, **kwargs)

    def close(self) -> None:
        """Release pooled connections and temporary trust material"""
        self._session.close()
        if self._trust_store is not None:
            self._trust_store.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def create_http_client(
    config: Optional[ClientConfig] = None,
    base_transport: Optional[BaseAdapter] = None,
) -> HttpClient:
    """Assemble a client from configuration

    Args:
        config: Client configuration (defaults to ``ClientConfig()``)
        base_transport: Transport performing the network I/O (defaults to a pooled HTTPAdapter)

    Returns:
        HttpClient ready to use

    Raises:
        InvalidPolicyError: If the retry configuration is invalid
        FileNotFoundError: If the configured CA bundle does not exist
    """
    if config is None:
        config = ClientConfig()

    trust_store = TrustStore(config.tls)
    transport = TransportFactory.create(config, base=base_transport)
    logger.info(
        f"Created HTTP client (timeout={config.timeout}s, "
        f"retry={'on' if config.retry.enabled else 'off'}, "
        f"max_attempts={config.retry.max_attempts if config.retry.enabled else 1})"
    )
    return HttpClient(
        transport,
        timeout=config.timeout,
        connect_timeout=config.connect_timeout,
        verify=trust_store.verify,
        headers=config.headers,
        trust_store=trust_store,
    )
