"""Crypto provider factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import JoseConfig, load_config
from .base import CryptoProvider, EncryptionResult


def get_provider(
    backend: Optional[str] = None, config: Optional[JoseConfig] = None
) -> CryptoProvider:
    """Factory function to get the configured crypto provider."""

    config = config or load_config()
    backend = (
        backend
        or os.getenv("JOSECORE_PROVIDER")
        or config.provider.backend
    ).lower()

    if backend == "cryptography":
        from .cryptography import CryptographyProvider

        return CryptographyProvider()
    else:
        raise ValueError(f"Unsupported crypto provider backend: {backend}")


__all__ = ["CryptoProvider", "EncryptionResult", "get_provider"]
