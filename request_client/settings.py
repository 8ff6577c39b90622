"""Environment-driven configuration for request clients."""

import os
from dataclasses import dataclass, fields
from typing import Any

from dotenv import load_dotenv

DEFAULT_CORRELATION_HEADER_NAME = "X-CorrelationID"
DEFAULT_PROTOCOL = "http"
DEFAULT_TIMEOUT_MS = 5000
DEFAULT_RETRY_MAX = 2
DEFAULT_MIN_BACKOFF_MS = 75
DEFAULT_MAX_BACKOFF_MS = 750

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Immutable per-client configuration shared by every call."""

    correlation_header_name: str = DEFAULT_CORRELATION_HEADER_NAME
    protocol: str = DEFAULT_PROTOCOL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    retry_max: int = DEFAULT_RETRY_MAX
    min_backoff_ms: int = DEFAULT_MIN_BACKOFF_MS
    max_backoff_ms: int = DEFAULT_MAX_BACKOFF_MS
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.correlation_header_name:
            raise ValueError("correlation_header_name must be a non-empty string.")
        if not self.protocol:
            raise ValueError("protocol must be a non-empty string.")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be greater than zero.")
        if self.retry_max < 0:
            raise ValueError("retry_max must be zero or greater.")
        if self.min_backoff_ms < 0:
            raise ValueError("min_backoff_ms must be zero or greater.")
        if self.min_backoff_ms > self.max_backoff_ms:
            raise ValueError("min_backoff_ms must not exceed max_backoff_ms.")

    @classmethod
    def from_overrides(cls, **overrides: Any) -> "ClientConfig":
        """Build a config where ``None`` overrides fall back to the defaults."""
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown ClientConfig fields: {', '.join(sorted(unknown))}")
        return cls(**{key: value for key, value in overrides.items() if value is not None})

    @classmethod
    def load(cls) -> "ClientConfig":
        """
        Load configuration from environment variables.

        Python-dotenv is used so developers can rely on a local .env file without
        exporting variables globally. Unset or empty variables keep their defaults.
        """
        load_dotenv()

        return cls.from_overrides(
            correlation_header_name=_env_str("REQUEST_CLIENT_CORRELATION_HEADER"),
            protocol=_env_str("REQUEST_CLIENT_PROTOCOL"),
            timeout_ms=_env_int("REQUEST_CLIENT_TIMEOUT_MS"),
            retry_max=_env_int("REQUEST_CLIENT_RETRY_MAX"),
            min_backoff_ms=_env_int("REQUEST_CLIENT_MIN_BACKOFF_MS"),
            max_backoff_ms=_env_int("REQUEST_CLIENT_MAX_BACKOFF_MS"),
            verbose=_env_bool("REQUEST_CLIENT_VERBOSE"),
        )


def _env_str(name: str) -> str | None:
    return os.getenv(name, "").strip() or None


def _env_int(name: str) -> int | None:
    raw = _env_str(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc


def _env_bool(name: str) -> bool | None:
    raw = _env_str(name)
    if raw is None:
        return None
    lowered = raw.lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag (true/false).")
