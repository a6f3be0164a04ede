"""
Runtime Configuration

Central configuration for proof verification: which notary key is trusted,
which root store validates server certificates, and how redactions render.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "PROOFVIEW_"

# Notary fixture key of the public notary server
# (fixture/notary/notary.key converted with `openssl ec -in notary.key -pubout`)
DEFAULT_NOTARY_PEM = """-----BEGIN PUBLIC KEY-----
MFkwEwYHKoZIzj0CAQYIKoZIzj0DAQcDQgAEBv36FI4ZFszJa0DQFJ3wWCXvVLFr
cRzMG5kaTeHGoSzDu6cFqx3uEWYpFGo6C0EOUgf+mEgbktLrXocv5yHzKg==
-----END PUBLIC KEY-----"""

DEFAULT_REDACTED_CHAR = "X"


@dataclass
class TrustConfig:
    """What a proof is checked against."""
    notary_pem: str = DEFAULT_NOTARY_PEM
    ca_bundle: Optional[str] = None  # PEM bundle path; None means certifi roots


@dataclass
class RenderConfig:
    """Plain-text rendering of transcripts."""
    redacted_char: str = DEFAULT_REDACTED_CHAR

    def __post_init__(self):
        if len(self.redacted_char) != 1:
            raise ValueError(
                f"redacted_char must be a single character, got {self.redacted_char!r}"
            )


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (and a .env file)
    - JSON file
    - Programmatic construction
    """
    trust: TrustConfig = field(default_factory=TrustConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - PROOFVIEW_NOTARY_PEM: notary public key as PEM text
        - PROOFVIEW_NOTARY_PEM_FILE: path to a PEM file (wins over the text form)
        - PROOFVIEW_CA_BUNDLE: PEM bundle of trusted root certificates
        - PROOFVIEW_REDACTED_CHAR: placeholder character for withheld bytes
        - PROOFVIEW_LOG_LEVEL / PROOFVIEW_LOG_FILE: logging
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}NOTARY_PEM"):
            overrides.setdefault("trust", {})["notary_pem"] = os.getenv(f"{ENV_PREFIX}NOTARY_PEM")
        pem_file = os.getenv(f"{ENV_PREFIX}NOTARY_PEM_FILE")
        if pem_file:
            overrides.setdefault("trust", {})["notary_pem"] = Path(pem_file).read_text(encoding="utf-8")
        if os.getenv(f"{ENV_PREFIX}CA_BUNDLE"):
            overrides.setdefault("trust", {})["ca_bundle"] = os.getenv(f"{ENV_PREFIX}CA_BUNDLE")

        if os.getenv(f"{ENV_PREFIX}REDACTED_CHAR"):
            overrides.setdefault("render", {})["redacted_char"] = os.getenv(f"{ENV_PREFIX}REDACTED_CHAR")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        trust_data = data.get("trust", {})
        render_data = data.get("render", {})

        return cls(
            trust=TrustConfig(**trust_data) if trust_data else TrustConfig(),
            render=RenderConfig(**render_data) if render_data else RenderConfig(),
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for key, value in overrides.get("trust", {}).items():
            setattr(new_config.trust, key, value)
        if "render" in overrides:
            new_config.render = RenderConfig(**{**new_config.render.__dict__, **overrides["render"]})
        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]
        return new_config


def load_config(path: Optional[str | Path] = None) -> RuntimeConfig:
    """
    Load configuration with precedence: env vars > config file > defaults.

    Args:
        path: Optional JSON config file
    """
    if path is not None:
        return RuntimeConfig.from_json(path).with_env_overrides()
    return RuntimeConfig.from_env()
