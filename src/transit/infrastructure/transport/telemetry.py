"""Telemetry transport: request logging and counters."""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter
from typing import Any, Dict, Optional

from requests.adapters import BaseAdapter
from requests.exceptions import RequestException

from transit.infrastructure.transport.base import TransportDecorator


class TelemetryTransport(TransportDecorator):
    """Transport that logs every request passing through it

    Stacked outside the retry layer it sees one event per logical call;
    stacked inside it sees every physical attempt.
    """

    def __init__(self, inner: BaseAdapter, logger: Optional[logging.Logger] = None):
        super().__init__(inner)
        self._log = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._requests = 0
        self._errors = 0
        self._statuses: Counter = Counter()

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        started = time.monotonic()
        try:
            response = self.inner.send(
                request, stream=stream, timeout=timeout, verify=verify, cert=cert, proxies=proxies
            )
        except RequestException as e:
            elapsed_ms = (time.monotonic() - started) * 1000
            self._record(status=None)
            self._log.warning(f"HTTP {request.method} {request.url} failed after {elapsed_ms:.1f} ms: {e}")
            raise
        except Exception as e:
            elapsed_ms = (time.monotonic() - started) * 1000
            self._record(status=None)
            self._log.info(f"HTTP {request.method} {request.url} aborted after {elapsed_ms:.1f} ms: {e}")
            raise

        elapsed_ms = (time.monotonic() - started) * 1000
        status = getattr(response, "status_code", None)
        self._record(status=status)
        self._log.debug(f"HTTP {request.method} {request.url} -> {status} in {elapsed_ms:.1f} ms")
        return response

    def _record(self, status: Optional[int]) -> None:
        with self._lock:
            self._requests += 1
            if status is None:
                self._errors += 1
            else:
                self._statuses[status] += 1

    def get_stats(self) -> Dict[str, Any]:
        """Get request statistics

        Returns:
            Dictionary with requests, errors and a per-status count
        """
        with self._lock:
            return {
                "requests": self._requests,
                "errors": self._errors,
                "statuses": dict(self._statuses),
            }
