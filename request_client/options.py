"""Per-call request options and their merge with client defaults."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from request_client.settings import ClientConfig


@dataclass(frozen=True, slots=True)
class RequestOptions:
    """Options supplied by the caller for a single request."""

    correlation_id: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    timeout_ms: int | None = None
    protocol: str | None = None

    @classmethod
    def coerce(cls, options: "RequestOptions | Mapping[str, Any] | None") -> "RequestOptions":
        """Accept ``None``, a ``RequestOptions`` or a plain mapping of its fields."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            known = {f.name for f in fields(cls)}
            unknown = set(options) - known
            if unknown:
                raise TypeError(f"Unknown request options: {', '.join(sorted(unknown))}")
            return cls(**{key: value for key, value in options.items() if value is not None})
        raise TypeError("options must be a RequestOptions instance or a mapping.")


@dataclass(frozen=True, slots=True)
class EffectiveOptions:
    """Result of merging call options over the client configuration."""

    correlation_header_name: str
    protocol: str
    timeout_ms: int
    retry_max: int
    min_backoff_ms: int
    max_backoff_ms: int
    verbose: bool
    correlation_id: str | None
    headers: dict[str, str]
    query: dict[str, str]


def merge_options(config: ClientConfig, options: RequestOptions | None = None) -> EffectiveOptions:
    """Overlay non-``None`` call options on ``config``.

    The merge is shallow: headers and query come only from ``options`` and are
    copied, so neither input is mutated.
    """
    options = options or RequestOptions()
    overrides = {
        "timeout_ms": options.timeout_ms,
        "protocol": options.protocol,
    }
    merged = {
        "correlation_header_name": config.correlation_header_name,
        "protocol": config.protocol,
        "timeout_ms": config.timeout_ms,
        "retry_max": config.retry_max,
        "min_backoff_ms": config.min_backoff_ms,
        "max_backoff_ms": config.max_backoff_ms,
        "verbose": config.verbose,
    }
    merged.update({key: value for key, value in overrides.items() if value is not None})
    if merged["timeout_ms"] <= 0:
        raise ValueError("timeout_ms must be greater than zero.")

    return EffectiveOptions(
        correlation_id=options.correlation_id or None,
        headers=dict(options.headers or {}),
        query=dict(options.query or {}),
        **merged,
    )
