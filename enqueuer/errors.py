"""Exceptions raised by the producer.

Store failures are not wrapped: whatever redis-py raises (``redis.RedisError`` and its
subclasses) reaches the caller unchanged.
"""


class EnqueuerError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(EnqueuerError, ValueError):
    """Options cannot be resolved into a usable client."""


class JidGenerationError(EnqueuerError, RuntimeError):
    """The random source could not produce a job id."""


class SerializationError(EnqueuerError, ValueError):
    """A job envelope cannot be rendered as JSON."""
