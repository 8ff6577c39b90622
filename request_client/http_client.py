"""HTTP client factory shared by the transport and the Consul resolver."""

import httpx


def create_async_client(
    *,
    timeout_ms: int,
    base_url: str = "",
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Build a short-lived AsyncClient for a single logical call.

    Clients are not pooled across calls; callers are expected to use the result
    as an async context manager.
    """
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout_ms / 1000,
        transport=transport,
    )
