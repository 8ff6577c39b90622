"""Transport seam between the executor and httpx."""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from request_client.errors import TransportFailure
from request_client.http_client import create_async_client

logger = logging.getLogger(__name__)

BODYLESS_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
_SNIPPET_LIMIT = 512


@dataclass(frozen=True, slots=True)
class OutgoingRequest:
    """Fully assembled request handed to a transport for one attempt."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    body: Any = field(default_factory=dict)
    timeout_ms: int = 5000


class Transport(Protocol):
    async def send(self, request: OutgoingRequest) -> httpx.Response:
        """Send one attempt, raising ``TransportFailure`` on any failure."""
        ...


def _snippet(response: httpx.Response) -> str:
    text = response.text.strip()
    if len(text) > _SNIPPET_LIMIT:
        text = f"{text[:_SNIPPET_LIMIT]}..."
    return text


class HttpxTransport:
    """Sends requests with a fresh ``httpx.AsyncClient`` per attempt."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def send(self, request: OutgoingRequest) -> httpx.Response:
        method, url = request.method, request.url
        kwargs: dict[str, Any] = {
            "headers": request.headers,
            "params": request.query,
        }
        if method not in BODYLESS_METHODS or request.body != {}:
            kwargs["json"] = request.body

        async with create_async_client(
            timeout_ms=request.timeout_ms,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(method, url, **kwargs)
            except httpx.TimeoutException as exc:
                raise TransportFailure(
                    f"Request timed out ({method} {url}).",
                    timed_out=True,
                ) from exc
            except (httpx.NetworkError, httpx.RemoteProtocolError) as exc:
                raise TransportFailure(
                    f"Connection failed ({method} {url}): {exc!s}",
                    connection_error=True,
                ) from exc
            except httpx.RequestError as exc:
                raise TransportFailure(f"Request failed ({method} {url}): {exc!s}") from exc
            except (httpx.InvalidURL, TypeError, ValueError) as exc:
                # Raised while building the request, e.g. a body json cannot encode.
                raise TransportFailure(
                    f"Unable to build request ({method} {url}): {exc!s}",
                    status_code=None,
                ) from exc

        if response.is_error:
            snippet = _snippet(response)
            logger.debug(
                "Service responded with error",
                extra={
                    "method": method,
                    "url": url,
                    "status_code": response.status_code,
                    "content": snippet,
                },
            )
            raise TransportFailure(
                f"HTTP error ({response.status_code}) during {method} {url}: "
                f"{snippet or 'no body provided.'}",
                status_code=response.status_code,
            )

        return response
