"""TLS trust store resolution.

Maps the TLS configuration onto the ``verify`` argument requests expects.
Certificates are handed to requests/urllib3 untouched; nothing here parses PEM.
"""

from __future__ import annotations

import logging
import os
import tempfile
from typing import Optional, Union

from transit.domain.config.tls import TLSConfig

logger = logging.getLogger(__name__)


class TrustStore:
    """Resolved trust settings for one client

    Attributes:
        verify: Value passed as ``verify`` to requests (bool or CA bundle path)
    """

    def __init__(self, config: Optional[TLSConfig] = None):
        if config is None:
            config = TLSConfig()
        self._temp_path: Optional[str] = None
        self.verify: Union[bool, str] = self._resolve(config)

    def _resolve(self, config: TLSConfig) -> Union[bool, str]:
        if not config.verify:
            logger.warning("TLS certificate verification is disabled")
            return False

        if config.ca_bundle is not None:
            if not config.ca_bundle.exists():
                raise FileNotFoundError(f"CA bundle not found: {config.ca_bundle}")
            logger.info(f"Using CA bundle: {config.ca_bundle}")
            return str(config.ca_bundle)

        if config.ca_cert_pem is not None:
            fd, path = tempfile.mkstemp(prefix="transit-ca-", suffix=".pem")
            with os.fdopen(fd, "w", encoding="ascii") as f:
                f.write(config.ca_cert_pem)
            self._temp_path = path
            logger.debug(f"Wrote inline CA certificate to {path}")
            return path

        return True

    def close(self) -> None:
        """Remove the temporary CA file, if one was written"""
        if self._temp_path is None:
            return
        try:
            os.unlink(self._temp_path)
        except FileNotFoundError:
            pass
        self._temp_path = None
