"""Redis structures the producer writes to.

Key layout (``ns`` is the resolved namespace, empty or ending in ``:``):

- ``{ns}queues``        SET   → names of every known queue
- ``{ns}queue:{name}``  LIST  → jobs ready for a worker
- ``{ns}schedule``      ZSET  → future jobs scored by run time
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from redis import Redis

QUEUES_KEY = "queues"
QUEUE_KEY_PREFIX = "queue:"
SCHEDULED_JOBS_KEY = "schedule"


@runtime_checkable
class Store(Protocol):
    def create_queue(self, queue: str) -> None: ...

    def push_immediate(self, queue: str, payload: str) -> None: ...

    def insert_scheduled(self, at: float, payload: str) -> None: ...


class RedisStore:
    """Store backed by a redis-py client. Errors from the client propagate unchanged."""

    def __init__(self, namespace: str, client: Redis):
        self.namespace = namespace
        self.client = client

    def queue_key(self, queue: str) -> str:
        return f"{self.namespace}{QUEUE_KEY_PREFIX}{queue}"

    @property
    def queues_key(self) -> str:
        return f"{self.namespace}{QUEUES_KEY}"

    @property
    def scheduled_jobs_key(self) -> str:
        return f"{self.namespace}{SCHEDULED_JOBS_KEY}"

    def create_queue(self, queue: str) -> None:
        # SADD is a no-op for an existing member
        self.client.sadd(self.queues_key, queue)

    def push_immediate(self, queue: str, payload: str) -> None:
        self.client.lpush(self.queue_key(queue), payload)

    def insert_scheduled(self, at: float, payload: str) -> None:
        self.client.zadd(self.scheduled_jobs_key, {payload: at})
