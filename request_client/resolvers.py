"""
Resolvers turn a logical address into a connectable ``host:port`` string.

Each resolver performs a single lookup per call. Nothing is cached and nothing
is retried here; the executor treats every failure as terminal.
"""

import asyncio
import json
import logging
import os
import socket
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

import httpx
from dotenv import load_dotenv
from kazoo.client import KazooClient
from kazoo.exceptions import KazooException, NoNodeError
from kazoo.handlers.threading import KazooTimeoutError

from request_client.errors import UnresolvedAddress
from request_client.http_client import create_async_client

logger = logging.getLogger(__name__)

DEFAULT_CONSUL_HTTP_ADDR = "http://127.0.0.1:8500"
CONSUL_TIMEOUT_MS = 2000
DEFAULT_ZOOKEEPER_HOSTS = "127.0.0.1:2181"
DEFAULT_ZOOKEEPER_BASE_PATH = "/services"
ZOOKEEPER_TIMEOUT_MS = 2000


@dataclass(frozen=True, slots=True)
class HostPortAddress:
    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True, slots=True)
class ContainerAddress:
    name: str
    port: int

    def __str__(self) -> str:
        return f"container {self.name}:{self.port}"


@dataclass(frozen=True, slots=True)
class ServiceName:
    name: str

    def __str__(self) -> str:
        return f"service {self.name}"


class Resolver(Protocol):
    async def resolve(self, address: Any) -> str:
        """Return ``host:port`` for ``address`` or raise ``UnresolvedAddress``."""
        ...


def _check_port(address: object, port: object) -> int:
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise UnresolvedAddress(address, f"invalid port {port!r}")
    return port


def _check_name(address: object, name: object) -> str:
    if not isinstance(name, str) or not name.strip():
        raise UnresolvedAddress(address, "name must be a non-empty string")
    return name.strip()


class StaticResolver:
    """Pass-through for explicit host and port."""

    async def resolve(self, address: HostPortAddress) -> str:
        host = _check_name(address, address.host)
        port = _check_port(address, address.port)
        return f"{host}:{port}"


AddrInfoLookup = Callable[..., Awaitable[list[tuple[Any, ...]]]]


class ContainerDNSResolver:
    """Confirms a container name is known to DNS and returns ``name:port``.

    The container name is kept in the endpoint rather than the looked-up IP so
    the ``Host`` header matches what the container expects.
    """

    def __init__(self, getaddrinfo: AddrInfoLookup | None = None) -> None:
        self._getaddrinfo = getaddrinfo

    async def resolve(self, address: ContainerAddress) -> str:
        name = _check_name(address, address.name)
        port = _check_port(address, address.port)
        lookup = self._getaddrinfo or asyncio.get_running_loop().getaddrinfo
        try:
            records = await lookup(name, port, type=socket.SOCK_STREAM)
        except OSError as exc:
            raise UnresolvedAddress(address, f"DNS lookup failed: {exc}") from exc
        if not records:
            raise UnresolvedAddress(address, "DNS lookup returned no records")
        logger.debug("Container resolved", extra={"container": name, "records": len(records)})
        return f"{name}:{port}"


class ConsulResolver:
    """Looks up a healthy instance of a service in the Consul health catalog."""

    def __init__(
        self,
        consul_url: str = DEFAULT_CONSUL_HTTP_ADDR,
        *,
        timeout_ms: int = CONSUL_TIMEOUT_MS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._consul_url = consul_url.rstrip("/")
        self._timeout_ms = timeout_ms
        self._transport = transport

    @classmethod
    def from_env(cls) -> "ConsulResolver":
        """Build a resolver pointed at ``CONSUL_HTTP_ADDR``."""
        load_dotenv()
        consul_url = os.getenv("CONSUL_HTTP_ADDR", "").strip() or DEFAULT_CONSUL_HTTP_ADDR
        if "://" not in consul_url:
            consul_url = f"http://{consul_url}"
        return cls(consul_url)

    async def resolve(self, address: ServiceName) -> str:
        name = _check_name(address, address.name)
        async with create_async_client(
            timeout_ms=self._timeout_ms,
            base_url=self._consul_url,
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(
                    f"/v1/health/service/{name}",
                    params={"passing": "true"},
                )
                response.raise_for_status()
                entries = response.json()
            except httpx.HTTPStatusError as exc:
                raise UnresolvedAddress(
                    address,
                    f"Consul responded with {exc.response.status_code}",
                ) from exc
            except httpx.HTTPError as exc:
                raise UnresolvedAddress(address, f"Consul request failed: {exc!s}") from exc
            except ValueError as exc:
                raise UnresolvedAddress(address, "Consul returned invalid JSON") from exc

        if not isinstance(entries, list) or not entries:
            raise UnresolvedAddress(address, "no healthy instances registered")

        entry = entries[0]
        service = entry.get("Service") or {}
        node = entry.get("Node") or {}
        host = service.get("Address") or node.get("Address")
        port = service.get("Port")
        if not host or not port:
            raise UnresolvedAddress(address, "Consul entry is missing an address or port")
        return f"{host}:{port}"


class ZookeeperResolver:
    """Reads a registered instance of a service from ZooKeeper.

    Instances live under ``{base_path}/{service}/{instance}``. A node holds
    either a service-discovery JSON record (``address`` and ``port``) or a
    plain ``host:port`` string. The first instance in sorted order wins.
    """

    def __init__(
        self,
        hosts: str = DEFAULT_ZOOKEEPER_HOSTS,
        *,
        base_path: str = DEFAULT_ZOOKEEPER_BASE_PATH,
        timeout_ms: int = ZOOKEEPER_TIMEOUT_MS,
        client_factory: Callable[..., KazooClient] = KazooClient,
    ) -> None:
        self._hosts = hosts
        self._base_path = "/" + base_path.strip("/")
        self._timeout_ms = timeout_ms
        self._client_factory = client_factory

    @classmethod
    def from_env(cls) -> "ZookeeperResolver":
        """Build a resolver from ``ZOOKEEPER_HOSTS`` and ``ZOOKEEPER_BASE_PATH``."""
        load_dotenv()
        hosts = os.getenv("ZOOKEEPER_HOSTS", "").strip() or DEFAULT_ZOOKEEPER_HOSTS
        base_path = os.getenv("ZOOKEEPER_BASE_PATH", "").strip() or DEFAULT_ZOOKEEPER_BASE_PATH
        return cls(hosts, base_path=base_path)

    async def resolve(self, address: ServiceName) -> str:
        name = _check_name(address, address.name)
        # kazoo blocks on its own connection thread.
        return await asyncio.to_thread(self._lookup, address, name)

    def _lookup(self, address: ServiceName, name: str) -> str:
        timeout = self._timeout_ms / 1000
        service_path = f"{self._base_path}/{name}"
        client = self._client_factory(hosts=self._hosts, timeout=timeout)
        try:
            client.start(timeout=timeout)
            instances = client.get_children(service_path)
            if not instances:
                raise UnresolvedAddress(address, "no instances registered")
            data, _ = client.get(f"{service_path}/{sorted(instances)[0]}")
        except NoNodeError as exc:
            raise UnresolvedAddress(address, f"{service_path} does not exist") from exc
        except (KazooException, KazooTimeoutError) as exc:
            raise UnresolvedAddress(address, f"ZooKeeper lookup failed: {exc!s}") from exc
        finally:
            client.stop()
            client.close()
        return _parse_instance(address, data)


def _parse_instance(address: ServiceName, data: bytes | None) -> str:
    raw = (data or b"").decode("utf-8", errors="replace").strip()
    if not raw:
        raise UnresolvedAddress(address, "instance node is empty")
    if not raw.startswith("{"):
        return raw
    try:
        record = json.loads(raw)
    except ValueError as exc:
        raise UnresolvedAddress(address, "instance node holds invalid JSON") from exc
    host = record.get("address")
    port = record.get("port")
    if not host or not port:
        raise UnresolvedAddress(address, "instance record is missing an address or port")
    return f"{host}:{port}"
