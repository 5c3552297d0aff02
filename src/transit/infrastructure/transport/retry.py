"""Retry-decorating transport.

Re-issues a request against the inner transport while it fails with a
transport error or answers with a retryable status, up to the policy's
attempt budget. The caller sees exactly the outcome of the last attempt.
This layer does not log; stack a telemetry transport around or inside it.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

import requests
from requests.adapters import BaseAdapter
from requests.exceptions import ChunkedEncodingError, ContentDecodingError, RequestException
from requests.utils import rewind_body
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from transit.domain.errors import CallTimedOutError, EmptyResponseError
from transit.domain.models.call_context import CallContext, current_call
from transit.domain.models.retry_policy import RetryPolicy
from transit.infrastructure.transport.base import TransportDecorator


def release_response(response: requests.Response) -> None:
    """Drain and close a discarded response so its connection goes back to the pool.

    A body that fails to drain is dropped along with its connection; the
    response is being discarded, so the failure must not end the call.
    """
    try:
        try:
            response.content
        except (ChunkedEncodingError, ContentDecodingError, RuntimeError):
            response.raw.read(decode_content=False)
    except (RequestException, Urllib3HTTPError, OSError):
        pass
    finally:
        response.close()


def _sleep_within_call(seconds: float) -> None:
    context = current_call()
    if context is None:
        time.sleep(seconds)
    else:
        context.wait(seconds)


def _has_replayable_body(request: requests.PreparedRequest) -> bool:
    body = request.body
    if body is None or isinstance(body, (bytes, str)):
        return True
    # requests records the start offset of seekable file bodies
    return isinstance(getattr(request, "_body_position", None), int)


def _last_outcome(retry_state: RetryCallState) -> requests.Response:
    # Returns the final response, or re-raises the final transport error
    return retry_state.outcome.result()


class RetryTransport(TransportDecorator):
    """Transport that retries failed or retryable-status requests

    Requests whose body is a one-shot stream (a generator or an unseekable
    file) cannot be replayed and are sent exactly once.
    """

    def __init__(
        self,
        inner: BaseAdapter,
        policy: RetryPolicy,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """Initialize retry transport

        Args:
            inner: Transport that performs each attempt
            policy: Immutable retry policy
            sleep: Pause function used between attempts (defaults to an
                interruptible wait bound to the current call)
        """
        super().__init__(inner)
        self.policy = policy
        self._sleep = sleep or _sleep_within_call

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        context = current_call()
        policy = self.policy if _has_replayable_body(request) else RetryPolicy.single_attempt()

        def attempt() -> requests.Response:
            attempt_timeout = context.clamp_timeout(timeout) if context is not None else timeout
            try:
                response = self.inner.send(
                    request,
                    stream=stream,
                    timeout=attempt_timeout,
                    verify=verify,
                    cert=cert,
                    proxies=proxies,
                )
            except requests.exceptions.Timeout as e:
                if context is not None and context.expired():
                    raise CallTimedOutError("Call deadline exceeded") from e
                raise
            if response is None:
                raise EmptyResponseError("Transport returned no response", request=request)
            return response

        retrying = Retrying(
            stop=stop_after_attempt(policy.max_attempts),
            wait=wait_fixed(policy.retry_delay),
            retry=(
                retry_if_exception_type(RequestException)
                | retry_if_result(lambda response: policy.is_retryable(response.status_code))
            ),
            before=lambda retry_state: self._before_attempt(retry_state, request, context),
            before_sleep=lambda retry_state: self._before_sleep(retry_state, context),
            sleep=self._sleep,
            retry_error_callback=_last_outcome,
        )
        return retrying(attempt)

    @staticmethod
    def _before_attempt(
        retry_state: RetryCallState,
        request: requests.PreparedRequest,
        context: Optional[CallContext],
    ) -> None:
        if context is not None:
            context.raise_if_done()
        if retry_state.attempt_number > 1 and not isinstance(request.body, (bytes, str, type(None))):
            rewind_body(request)

    @staticmethod
    def _before_sleep(retry_state: RetryCallState, context: Optional[CallContext]) -> None:
        outcome = retry_state.outcome
        if outcome is not None and not outcome.failed:
            release_response(outcome.result())
        if context is not None:
            context.raise_if_done()
