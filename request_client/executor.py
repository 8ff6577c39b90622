"""
Request execution pipeline shared by every client variant.

One call resolves the service location, assembles the outgoing request with
its correlation header, then drives the retry policy over transport attempts.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Callable
from uuid import uuid4

import httpx

from request_client.errors import (
    InvalidVerb,
    ResolutionFailure,
    RetryExhausted,
    TransportFailure,
)
from request_client.options import RequestOptions, merge_options
from request_client.resolvers import Resolver
from request_client.retry import AttemptRecord, RetryPolicy, is_retryable
from request_client.settings import ClientConfig
from request_client.transport import HttpxTransport, OutgoingRequest, Transport

METHODS_ALLOWED = ("GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH", "HEAD")


def normalize_verb(verb: object) -> str:
    """Upper-case ``verb`` and check it against the supported methods."""
    if not isinstance(verb, str) or verb.upper() not in METHODS_ALLOWED:
        raise InvalidVerb(verb)
    return verb.upper()


class RequestExecutor:
    """Executes calls against an endpoint resolved fresh for every request."""

    def __init__(
        self,
        resolver: Resolver,
        address: Any,
        *,
        service_path: str = "",
        config: ClientConfig | None = None,
        transport: Transport | None = None,
        logger: logging.Logger | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._resolver = resolver
        self._address = address
        self._service_path = service_path
        self._config = config or ClientConfig()
        self._transport = transport or HttpxTransport()
        self._logger = logger or logging.getLogger(__name__)
        self._sleep = sleep

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def address(self) -> Any:
        return self._address

    async def resolve_service_base_url(self, protocol: str | None = None) -> str:
        """Resolve the address and build ``protocol://host:port[/service_path]``."""
        host_port = await self._resolver.resolve(self._address)
        base_url = f"{protocol or self._config.protocol}://{host_port}"
        if self._service_path:
            base_url = f"{base_url}/{self._service_path}"
        self._logger.debug("Resolved service base URL", extra={"url": base_url})
        return base_url

    async def execute(
        self,
        verb: str,
        path: str = "",
        options: RequestOptions | Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> httpx.Response:
        method = normalize_verb(verb)
        if path is None:
            path = ""
        if not isinstance(path, str):
            raise TypeError("path must be a string.")

        effective = merge_options(self._config, RequestOptions.coerce(options))
        correlation_id = effective.correlation_id or str(uuid4())
        headers = dict(effective.headers)
        headers[effective.correlation_header_name] = correlation_id
        query = effective.query

        try:
            base_url = await self.resolve_service_base_url(effective.protocol)
        except Exception as exc:
            failure = ResolutionFailure(self._address, exc)
            self._logger.error(
                "unable to resolve service location",
                extra={
                    "method": method,
                    "url": None,
                    "headers": headers,
                    "query": query,
                    "error": str(exc),
                },
            )
            raise failure from exc

        request = OutgoingRequest(
            method=method,
            url="/".join([base_url, path]),
            headers=headers,
            query=query,
            body=body if body is not None else {},
            timeout_ms=effective.timeout_ms,
        )
        context = {
            "method": request.method,
            "url": request.url,
            "headers": request.headers,
            "query": request.query,
        }
        if effective.verbose:
            self._logger.info("performing request", extra=context)

        policy = RetryPolicy.from_options(effective)
        record = AttemptRecord()
        while True:
            record.attempt += 1
            try:
                response = await self._attempt(request)
            except TransportFailure as exc:
                record.last_error = exc
                if policy.should_retry(record.attempt, exc):
                    delay_ms = policy.backoff_ms(record.attempt)
                    self._logger.warning(
                        "retry request",
                        extra={
                            **context,
                            "attempt": record.attempt,
                            "error": str(exc),
                            "delay_ms": delay_ms,
                        },
                    )
                    await self._sleep(delay_ms / 1000)
                    record.backoff_ms += delay_ms
                    continue

                self._log_terminal_failure(context, record)
                if is_retryable(exc):
                    raise RetryExhausted(exc, record.attempt) from exc
                raise
            except Exception as exc:
                record.last_error = exc
                self._log_terminal_failure(context, record)
                raise

            if effective.verbose:
                self._logger.info(
                    "request completed successfully",
                    extra={**context, "attempt": record.attempt},
                )
            return response

    def _log_terminal_failure(self, context: dict[str, Any], record: AttemptRecord) -> None:
        error = record.last_error
        self._logger.error(
            "request failed with an error",
            extra={
                **context,
                "attempt": record.attempt,
                "error": str(error),
                "status_code": getattr(error, "status_code", None),
                "backoff_ms": record.backoff_ms,
            },
        )

    async def _attempt(self, request: OutgoingRequest) -> httpx.Response:
        try:
            return await asyncio.wait_for(
                self._transport.send(request),
                timeout=request.timeout_ms / 1000,
            )
        except asyncio.TimeoutError as exc:
            raise TransportFailure(
                f"Request timed out ({request.method} {request.url}).",
                timed_out=True,
            ) from exc
