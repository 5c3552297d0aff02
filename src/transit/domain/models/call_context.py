"""Per-call deadline and cancellation state.

A logical call publishes its context through a context variable so that
transports deep in the chain can observe it without changing the
``BaseAdapter.send`` signature.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple, Union

from transit.domain.errors import CallCancelledError, CallTimedOutError

# requests accepts a single float or a (connect, read) pair
Timeout = Union[None, float, Tuple[Optional[float], Optional[float]]]

_CURRENT_CALL: ContextVar[Optional["CallContext"]] = ContextVar("transit_current_call", default=None)


@dataclass
class CallContext:
    """Deadline and cancellation signal of one logical call.

    Attributes:
        deadline: Absolute ``time.monotonic()`` value, or None for no deadline
        cancel: Event set by the caller to cancel the call
    """

    deadline: Optional[float] = None
    cancel: threading.Event = field(default_factory=threading.Event)

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (never negative), None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def cancelled(self) -> bool:
        return self.cancel.is_set()

    def raise_if_done(self) -> None:
        """Raise if the call was cancelled or ran out of time.

        Raises:
            CallCancelledError: If the cancel event is set
            CallTimedOutError: If the deadline has passed
        """
        if self.cancelled():
            raise CallCancelledError("Call cancelled")
        if self.expired():
            raise CallTimedOutError("Call deadline exceeded")

    def wait(self, seconds: float) -> None:
        """Sleep for up to ``seconds``, waking early on cancellation or deadline.

        Raises:
            CallCancelledError: If the cancel event fires before or during the wait
            CallTimedOutError: If the deadline is reached before or during the wait
        """
        end = time.monotonic() + seconds
        while True:
            self.raise_if_done()
            left = end - time.monotonic()
            remaining = self.remaining()
            if remaining is not None:
                left = min(left, remaining)
            if left <= 0:
                self.raise_if_done()
                return
            self.cancel.wait(left)

    def clamp_timeout(self, timeout: Timeout) -> Timeout:
        """Narrow a requests timeout so that one attempt cannot outlive the deadline.

        Raises:
            CallTimedOutError: If no time is left; a zero socket timeout is invalid
        """
        remaining = self.remaining()
        if remaining is None:
            return timeout
        if remaining <= 0:
            raise CallTimedOutError("Call deadline exceeded")
        if timeout is None:
            return remaining
        if isinstance(timeout, tuple):
            connect, read = timeout
            return (
                remaining if connect is None else min(connect, remaining),
                remaining if read is None else min(read, remaining),
            )
        return min(timeout, remaining)


def current_call() -> Optional[CallContext]:
    """Return the context of the logical call in progress, if any."""
    return _CURRENT_CALL.get()


@contextmanager
def call_scope(
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
) -> Iterator[CallContext]:
    """Publish a fresh call context for the duration of the block.

    Args:
        timeout: Overall budget in seconds (None = unbounded)
        cancel: Caller-owned cancellation event (a private one is created if None)

    Yields:
        The published CallContext
    """
    deadline = time.monotonic() + timeout if timeout is not None else None
    context = CallContext(deadline=deadline, cancel=cancel if cancel is not None else threading.Event())
    token = _CURRENT_CALL.set(context)
    try:
        yield context
    finally:
        _CURRENT_CALL.reset(token)
