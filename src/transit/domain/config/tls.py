"""TLS trust configuration model."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, model_validator


class TLSConfig(BaseModel):
    """Configuration for server certificate verification.

    Attributes:
        verify: Verify server certificates (False disables verification)
        ca_bundle: Path to a PEM CA bundle replacing the system trust store
        ca_cert_pem: Inline PEM CA certificate(s)
    """

    verify: bool = True
    ca_bundle: Optional[Path] = None
    ca_cert_pem: Optional[str] = None

    @model_validator(mode="after")
    def _check_trust_source(self) -> "TLSConfig":
        if self.ca_bundle is not None and self.ca_cert_pem is not None:
            raise ValueError("ca_bundle and ca_cert_pem are mutually exclusive")
        return self
