"""Producer — routes jobs to the ready queue or the scheduled set."""

from __future__ import annotations

import time
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable

from redis import Redis

from enqueuer.config import Options
from enqueuer.envelope import EnqueueOptions, build_envelope
from enqueuer.jid import generate_jid
from enqueuer.log import get_logger
from enqueuer.options import ResolvedOptions, resolve_options, resolve_options_with_redis_client

log = get_logger(__name__)


class Producer:
    """Pushes job envelopes into Redis for a separate worker process.

    Holds nothing but the resolved options, so one instance can be shared freely
    between threads.
    """

    def __init__(self, opts: ResolvedOptions, clock: Callable[[], float] = time.time):
        self.opts = opts
        self._clock = clock

    @classmethod
    def create(cls, options: Options) -> "Producer":
        return cls(resolve_options(options))

    @classmethod
    def with_redis_client(cls, options: Options, client: Redis) -> "Producer":
        return cls(resolve_options_with_redis_client(options, client))

    @property
    def redis_client(self) -> Redis:
        return self.opts.client

    # ── Entry points ─────────────────────────────────────────────────────────

    def enqueue(self, queue: str, class_: str, args: Any) -> str:
        # at=0 is never after now, and is left out of the envelope. Producers that
        # stamp at=now on immediate jobs put "at" on the wire; consumers must treat a
        # missing "at" as due immediately.
        return self.enqueue_with_options(queue, class_, args, EnqueueOptions())

    def enqueue_in(self, queue: str, class_: str, in_seconds: float, args: Any) -> str:
        return self.enqueue_with_options(
            queue, class_, args, EnqueueOptions(at=self._clock() + in_seconds)
        )

    def enqueue_in_with_options(
        self,
        queue: str,
        class_: str,
        in_seconds: float,
        args: Any,
        options: EnqueueOptions,
    ) -> str:
        options = replace(options, at=self._clock() + in_seconds)
        return self.enqueue_with_options(queue, class_, args, options)

    def enqueue_at(self, queue: str, class_: str, at: datetime, args: Any) -> str:
        return self.enqueue_with_options(queue, class_, args, EnqueueOptions(at=at.timestamp()))

    def enqueue_with_options(self, queue: str, class_: str, args: Any, options: EnqueueOptions) -> str:
        """
        Store one job and return its jid.

        Jobs whose ``at`` lies after the current time go to the scheduled set; everything
        else (including ``at == now``) is pushed onto the queue right away.
        """
        now = self._clock()
        data = build_envelope(queue, class_, args, options, generate_jid(), now)
        payload = data.to_json()
        store = self.opts.store

        if now < data.at:
            store.insert_scheduled(data.at, payload)
            log.debug("job_scheduled", queue=queue, job_class=class_, jid=data.jid, at=data.at)
            return data.jid

        store.create_queue(queue)
        store.push_immediate(queue, payload)
        log.debug("job_enqueued", queue=queue, job_class=class_, jid=data.jid)
        return data.jid
