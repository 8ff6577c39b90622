"""
Resilient HTTP request clients for services located at call time.

Clients resolve the service endpoint on every request, attach a correlation
header and retry transient failures with bounded linear backoff.
"""

from request_client.client import (
    ConsulRequestClient,
    ContainerDNSRequestClient,
    HostPortRequestClient,
    RequestClient,
    ZookeeperRequestClient,
)
from request_client.errors import (
    InvalidVerb,
    RequestClientError,
    ResolutionFailure,
    RetryExhausted,
    TransportFailure,
    UnresolvedAddress,
)
from request_client.options import RequestOptions, merge_options
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
from request_client.retry import RetryPolicy
from request_client.settings import ClientConfig

__all__ = [
    "ClientConfig",
    "ConsulRequestClient",
    "ConsulResolver",
    "ContainerAddress",
    "ContainerDNSRequestClient",
    "ContainerDNSResolver",
    "HostPortAddress",
    "HostPortRequestClient",
    "InvalidVerb",
    "RequestClient",
    "RequestClientError",
    "RequestOptions",
    "ResolutionFailure",
    "Resolver",
    "RetryExhausted",
    "RetryPolicy",
    "ServiceName",
    "StaticResolver",
    "TransportFailure",
    "UnresolvedAddress",
    "ZookeeperRequestClient",
    "ZookeeperResolver",
    "merge_options",
]
