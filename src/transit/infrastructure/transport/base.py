"""Base transport decorator.

Any ``requests.adapters.BaseAdapter`` is a transport: it executes one
prepared request and returns one response or raises a
``requests.exceptions.RequestException``. Decorators are adapters that wrap
another adapter, so the whole chain stays mountable on a ``requests.Session``.
"""

from abc import ABC, abstractmethod

from requests.adapters import BaseAdapter


class TransportDecorator(BaseAdapter, ABC):
    """Transport that wraps exactly one inner transport"""

    def __init__(self, inner: BaseAdapter):
        """Initialize decorator

        Args:
            inner: Transport to delegate to (owned by this decorator)
        """
        super().__init__()
        self.inner = inner

    @abstractmethod
    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        """Send a prepared request through the inner transport

        Returns:
            requests.Response

        Raises:
            requests.exceptions.RequestException: If no response could be produced
        """
        pass

    def close(self) -> None:
        """Close the inner transport"""
        self.inner.close()
