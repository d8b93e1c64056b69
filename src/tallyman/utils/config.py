"""
Tallyman Configuration Management

Client configuration records and process-level settings.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import httpx
import yaml

from .errors import ValidationError

DEFAULT_BASE_URL = "https://api.jujucharms.com/omnibus/v3"
DEFAULT_TERMS_URL = "https://api.jujucharms.com/terms/v1"

TERMS_URL_ENV = "TALLYMAN_TERMS_URL"


@dataclass(frozen=True)
class ClientConfig:
    """Construction options for an API client.

    Omitted fields take the client's defaults: a fresh ``httpx.Client`` for
    the transport and the service's production URL for ``base_url``.
    """

    transport: Optional[httpx.Client] = None
    base_url: Optional[str] = None
    timeout: float = 10.0
    verify_ssl: bool = True


def resolve_terms_url(
    config: ClientConfig, environ: Optional[Mapping[str, str]] = None
) -> str:
    """Resolve the terms service URL: explicit option, then environment, then default."""
    if config.base_url:
        return config.base_url
    env = os.environ if environ is None else environ
    return env.get(TERMS_URL_ENV) or DEFAULT_TERMS_URL


def _parse_timeout(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ValidationError(
            f"invalid timeout {value!r}: expecting a number of seconds",
            field="timeout",
        )


@dataclass
class TallymanConfig:
    """Process-level settings for the command line."""

    base_url: str = DEFAULT_BASE_URL
    terms_url: Optional[str] = None
    timeout: float = 10.0
    verify_ssl: bool = True

    # Logging configuration
    log_level: str = "WARNING"
    enable_structured_logging: bool = False

    # Model the budget commands act on
    model_uuid: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TallymanConfig":
        """Create configuration from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            base_url=env.get("TALLYMAN_BASE_URL", DEFAULT_BASE_URL),
            terms_url=env.get(TERMS_URL_ENV),
            timeout=_parse_timeout(env.get("TALLYMAN_TIMEOUT", "10.0")),
            verify_ssl=env.get("TALLYMAN_SSL_VERIFY", "true").lower() == "true",
            log_level=env.get("TALLYMAN_LOG_LEVEL", "WARNING"),
            enable_structured_logging=env.get(
                "TALLYMAN_STRUCTURED_LOGGING", "false"
            ).lower()
            == "true",
            model_uuid=env.get("TALLYMAN_MODEL_UUID"),
        )

    @classmethod
    def from_file(cls, path: str) -> "TallymanConfig":
        """Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValidationError: If the file is not a mapping or has unknown keys
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(config_path, "r", encoding="utf-8") as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValidationError(f"invalid YAML in config file {path}: {e}")

        if not isinstance(raw, dict):
            raise ValidationError(f"config file {path} must contain a mapping")

        allowed = {f.name for f in fields(cls)}
        unknown = set(raw) - allowed
        if unknown:
            raise ValidationError(
                f"unknown configuration keys: {', '.join(sorted(unknown))}"
            )
        return cls(**raw)

    def client_config(
        self, transport: Optional[httpx.Client] = None, terms: bool = False
    ) -> ClientConfig:
        """Build the ClientConfig for one of the service clients."""
        return ClientConfig(
            transport=transport,
            base_url=self.terms_url if terms else self.base_url,
            timeout=self.timeout,
            verify_ssl=self.verify_ssl,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "base_url": self.base_url,
            "terms_url": self.terms_url,
            "timeout": self.timeout,
            "verify_ssl": self.verify_ssl,
            "log_level": self.log_level,
            "enable_structured_logging": self.enable_structured_logging,
            "model_uuid": self.model_uuid,
        }
