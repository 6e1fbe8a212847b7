"""Options resolution — validates Options and turns them into a ready Redis client.

Two entry points share one validation path:

- ``resolve_options`` builds its own client (direct or sentinel).
- ``resolve_options_with_redis_client`` takes a caller-owned client, so one connection
  pool can be shared between producers and consumers.

No command is sent to Redis here; connection errors surface on first use.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional, Union

import redis
from redis import Redis
from redis.sentinel import Sentinel

from enqueuer.config import Options, TLSConfig
from enqueuer.errors import ConfigurationError
from enqueuer.log import get_logger
from enqueuer.pool import BlockingSentinelConnectionPool
from enqueuer.store import RedisStore, Store

log = get_logger(__name__)

DEFAULT_POOL_SIZE = 1
DEFAULT_POLL_INTERVAL = timedelta(seconds=15)
NAMESPACE_SEPARATOR = ":"
REDIS_PORT = 6379
SENTINEL_PORT = 26379


# ── Types ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DirectTopology:
    address: str


@dataclass(frozen=True)
class SentinelTopology:
    addresses: tuple[str, ...]
    master_name: str


Topology = Union[DirectTopology, SentinelTopology]


@dataclass(frozen=True)
class ResolvedOptions:
    client: Redis
    store: Store
    topology: Topology
    process_id: str
    namespace: str
    pool_size: int
    poll_interval: timedelta
    tls: Optional[TLSConfig] = None


# ── Validation ───────────────────────────────────────────────────────────────


def _select_topology(options: Options) -> Topology:
    server = options.server_addr.strip()
    raw_sentinels = options.sentinel_addrs.strip()

    if server and raw_sentinels:
        raise ConfigurationError("Configure accepts either the Server or Sentinels option, not both")

    if raw_sentinels:
        addresses = tuple(a.strip() for a in raw_sentinels.split(",") if a.strip())
        if not addresses:
            raise ConfigurationError(f"Sentinels option contains no addresses: {options.sentinel_addrs!r}")
        master_name = options.redis_master_name.strip()
        if not master_name:
            raise ConfigurationError("Sentinel configuration requires a master name")
        return SentinelTopology(addresses=addresses, master_name=master_name)

    if server:
        return DirectTopology(address=server)

    raise ConfigurationError("Configure requires either the Server or Sentinels option")


def normalize_namespace(namespace: str) -> str:
    """Terminate a non-empty namespace with exactly one ``:``."""
    if namespace and not namespace.endswith(NAMESPACE_SEPARATOR):
        return namespace + NAMESPACE_SEPARATOR
    return namespace


def _split_addr(addr: str, default_port: int) -> tuple[str, int]:
    """Split ``host[:port]`` (IPv6 hosts in brackets)."""
    host, sep, port = addr.rpartition(":")
    if not sep or host.endswith(":") or (host.startswith("[") and not host.endswith("]")):
        host, port = addr, ""
    host = host.strip("[]")
    if not host:
        raise ConfigurationError(f"Invalid Redis address: {addr!r}")
    if not port:
        return host, default_port
    try:
        return host, int(port)
    except ValueError:
        raise ConfigurationError(f"Invalid port in Redis address: {addr!r}") from None


# ── Client construction ──────────────────────────────────────────────────────


def _tls_kwargs(tls: Optional[TLSConfig]) -> dict:
    return tls.connection_kwargs() if tls is not None else {}


def _build_client(topology: Topology, options: Options, pool_size: int) -> Redis:
    password = options.password or None
    tls_kwargs = _tls_kwargs(options.tls)

    if isinstance(topology, SentinelTopology):
        sentinel = Sentinel(
            [_split_addr(a, SENTINEL_PORT) for a in topology.addresses],
            sentinel_kwargs={"ssl": True, **tls_kwargs} if options.tls else None,
        )
        # Blocks the caller when every connection is in use.
        return sentinel.master_for(
            topology.master_name,
            connection_pool_class=BlockingSentinelConnectionPool,
            db=options.database,
            password=password,
            max_connections=pool_size,
            ssl=options.tls is not None,
            **tls_kwargs,
        )

    host, port = _split_addr(topology.address, REDIS_PORT)
    # Blocks the caller when every connection is in use.
    pool = redis.BlockingConnectionPool(
        host=host,
        port=port,
        db=options.database,
        password=password,
        max_connections=pool_size,
        timeout=None,
        connection_class=redis.SSLConnection if options.tls else redis.Connection,
        **tls_kwargs,
    )
    return Redis(connection_pool=pool)


# ── Public API ───────────────────────────────────────────────────────────────


def _resolve(options: Options, client_for: Callable[[Topology, int], Redis]) -> ResolvedOptions:
    topology = _select_topology(options)

    process_id = options.process_id.strip()
    if not process_id:
        raise ConfigurationError("Configure requires a ProcessID, which uniquely identifies this instance")

    pool_size = options.pool_size if options.pool_size > 0 else DEFAULT_POOL_SIZE
    poll_interval = options.poll_interval if options.poll_interval > timedelta(0) else DEFAULT_POLL_INTERVAL
    namespace = normalize_namespace(options.namespace)

    client = client_for(topology, pool_size)
    log.debug(
        "options_resolved",
        topology=type(topology).__name__,
        process_id=process_id,
        namespace=namespace,
        pool_size=pool_size,
        tls=options.tls is not None,
    )
    return ResolvedOptions(
        client=client,
        store=RedisStore(namespace, client),
        topology=topology,
        process_id=process_id,
        namespace=namespace,
        pool_size=pool_size,
        poll_interval=poll_interval,
        tls=options.tls,
    )


def resolve_options(options: Options) -> ResolvedOptions:
    """Validate ``options`` and build a new pooled client for the configured topology."""
    return _resolve(options, lambda topology, pool_size: _build_client(topology, options, pool_size))


def resolve_options_with_redis_client(options: Options, client: Redis) -> ResolvedOptions:
    """Validate ``options`` but use ``client`` instead of building one."""
    if client is None:
        raise ConfigurationError("A Redis client is required")
    return _resolve(options, lambda topology, pool_size: client)
