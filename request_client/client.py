"""
Public request clients.

``RequestClient`` binds any resolver and address to the shared execution
pipeline. The named variants only choose the resolver and address type.
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from request_client.executor import RequestExecutor
from request_client.options import RequestOptions
from request_client.resolvers import (
    ConsulResolver,
    ContainerAddress,
    ContainerDNSResolver,
    HostPortAddress,
    Resolver,
    ServiceName,
    StaticResolver,
    ZookeeperResolver,
)
from request_client.settings import ClientConfig
from request_client.transport import Transport

Options = RequestOptions | Mapping[str, Any] | None


class RequestClient:
    """Verb-based HTTP client for a service located through ``resolver``."""

    def __init__(
        self,
        resolver: Resolver,
        address: Any,
        *,
        service_path: str = "",
        config: ClientConfig | None = None,
        transport: Transport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._logger = logger or logging.getLogger(f"{__name__}.{type(self).__name__}")
        self._executor = RequestExecutor(
            resolver,
            address,
            service_path=service_path.strip("/"),
            config=config,
            transport=transport,
            logger=self._logger,
        )

    @property
    def config(self) -> ClientConfig:
        return self._executor.config

    @property
    def address(self) -> Any:
        return self._executor.address

    async def resolve_service_base_url(self) -> str:
        """Resolve the current base URL without issuing a request."""
        return await self._executor.resolve_service_base_url()

    async def get(self, path: str, options: Options = None) -> httpx.Response:
        return await self.method("GET", path, options)

    async def options(self, path: str, options: Options = None) -> httpx.Response:
        return await self.method("OPTIONS", path, options)

    async def head(self, path: str, options: Options = None, body: Any = None) -> httpx.Response:
        return await self.method("HEAD", path, options, body)

    async def post(self, path: str, options: Options = None, body: Any = None) -> httpx.Response:
        return await self.method("POST", path, options, body)

    async def put(self, path: str, options: Options = None, body: Any = None) -> httpx.Response:
        return await self.method("PUT", path, options, body)

    async def patch(self, path: str, options: Options = None, body: Any = None) -> httpx.Response:
        return await self.method("PATCH", path, options, body)

    async def delete(self, path: str, options: Options = None, body: Any = None) -> httpx.Response:
        return await self.method("DELETE", path, options, body)

    async def method(
        self,
        verb: str,
        path: str,
        options: Options = None,
        body: Any = None,
    ) -> httpx.Response:
        """Perform ``verb`` against ``path`` relative to the resolved base URL."""
        return await self._executor.execute(verb, path, options, body)


class HostPortRequestClient(RequestClient):
    """Client for a service at a fixed host and port."""

    def __init__(
        self,
        host: str,
        port: int,
        service_path: str = "",
        config: ClientConfig | None = None,
        *,
        transport: Transport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(
            StaticResolver(),
            HostPortAddress(host, port),
            service_path=service_path,
            config=config,
            transport=transport,
            logger=logger,
        )


class ContainerDNSRequestClient(RequestClient):
    """Client for a container reachable by its DNS name."""

    def __init__(
        self,
        container_name: str,
        container_port: int,
        service_path: str = "",
        config: ClientConfig | None = None,
        *,
        resolver: ContainerDNSResolver | None = None,
        transport: Transport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(
            resolver or ContainerDNSResolver(),
            ContainerAddress(container_name, container_port),
            service_path=service_path,
            config=config,
            transport=transport,
            logger=logger,
        )


class ConsulRequestClient(RequestClient):
    """Client for a service registered in Consul; the name is the base path."""

    def __init__(
        self,
        service_name: str,
        config: ClientConfig | None = None,
        *,
        resolver: ConsulResolver | None = None,
        transport: Transport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(
            resolver or ConsulResolver.from_env(),
            ServiceName(service_name),
            service_path=service_name,
            config=config,
            transport=transport,
            logger=logger,
        )
        self._logger.info(
            "Creating ConsulRequestClient",
            extra={"service_name": service_name},
        )


class ZookeeperRequestClient(RequestClient):
    """Client for a service registered in ZooKeeper; the name is the base path."""

    def __init__(
        self,
        service_name: str,
        config: ClientConfig | None = None,
        *,
        resolver: ZookeeperResolver | None = None,
        transport: Transport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(
            resolver or ZookeeperResolver.from_env(),
            ServiceName(service_name),
            service_path=service_name,
            config=config,
            transport=transport,
            logger=logger,
        )
