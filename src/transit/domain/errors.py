"""Error types raised by transit."""

import requests


class TransitError(Exception):
    """Base class for transit errors."""

    pass


class InvalidPolicyError(TransitError, ValueError):
    """Retry policy failed validation at construction time."""

    pass


class CallAbortedError(TransitError):
    """A logical call was stopped before it produced a result.

    Never a ``requests.exceptions.RequestException``: aborted calls are not
    retried.
    """

    pass


class CallCancelledError(CallAbortedError):
    """The caller's cancellation signal fired."""

    pass


class CallTimedOutError(CallAbortedError):
    """The per-call deadline elapsed."""

    pass


class EmptyResponseError(requests.exceptions.ConnectionError):
    """The inner transport returned neither a response nor an error."""

    pass
