"""Producer side of a Redis-backed, Sidekiq-compatible job queue."""

from enqueuer.config import Options, TLSConfig, get_options
from enqueuer.envelope import EnqueueData, EnqueueOptions
from enqueuer.errors import ConfigurationError, EnqueuerError, JidGenerationError, SerializationError
from enqueuer.options import ResolvedOptions, resolve_options, resolve_options_with_redis_client
from enqueuer.producer import Producer
from enqueuer.store import RedisStore, Store

__all__ = [
    "ConfigurationError",
    "EnqueueData",
    "EnqueueOptions",
    "EnqueuerError",
    "JidGenerationError",
    "Options",
    "Producer",
    "RedisStore",
    "ResolvedOptions",
    "SerializationError",
    "Store",
    "TLSConfig",
    "get_options",
    "resolve_options",
    "resolve_options_with_redis_client",
]
