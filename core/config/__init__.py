"""
Runtime Configuration Module

Provides configuration loading and the process-wide trusted notary key.
"""

from .runtime import (
    DEFAULT_NOTARY_PEM,
    DEFAULT_REDACTED_CHAR,
    RenderConfig,
    RuntimeConfig,
    TrustConfig,
    load_config,
)
from .keys import TrustedKey, TrustedKeyStore, get_trusted_key_store

__all__ = [
    "DEFAULT_NOTARY_PEM",
    "DEFAULT_REDACTED_CHAR",
    "RenderConfig",
    "RuntimeConfig",
    "TrustConfig",
    "load_config",
    "TrustedKey",
    "TrustedKeyStore",
    "get_trusted_key_store",
]
