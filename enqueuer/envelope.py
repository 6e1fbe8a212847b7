"""Job envelope — the JSON record a worker process reads back out of Redis.

Key names and omission rules are shared with the consumer side, so ``to_dict`` must
keep this exact shape::

    {"queue": ..., "class": ..., "args": ..., "jid": ..., "enqueued_at": ...,
     "retry_count": ..., "retry": ..., "at": ...}

``queue``, ``retry_count``, ``retry`` and ``at`` are dropped when empty/zero.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from enqueuer.errors import SerializationError


@dataclass
class EnqueueOptions:
    retry_count: int = 0
    retry: bool = False
    at: float = 0.0  # seconds since epoch

    def to_dict(self) -> dict:
        d: dict[str, Any] = {}
        if self.retry_count:
            d["retry_count"] = self.retry_count
        if self.retry:
            d["retry"] = self.retry
        if self.at:
            d["at"] = self.at
        return d


@dataclass
class EnqueueData:
    queue: str
    class_: str
    args: Any
    jid: str
    enqueued_at: float
    options: EnqueueOptions = field(default_factory=EnqueueOptions)

    @property
    def at(self) -> float:
        return self.options.at

    def to_dict(self) -> dict:
        d: dict[str, Any] = {}
        if self.queue:
            d["queue"] = self.queue
        d["class"] = self.class_
        d["args"] = self.args
        d["jid"] = self.jid
        d["enqueued_at"] = self.enqueued_at
        d.update(self.options.to_dict())
        return d

    def to_json(self) -> str:
        try:
            return json.dumps(
                self.to_dict(),
                separators=(",", ":"),
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"cannot serialize job {self.jid} ({self.class_}): {exc}") from exc

    @classmethod
    def from_json(cls, raw: str | bytes) -> "EnqueueData":
        try:
            d = json.loads(raw)
        except ValueError as exc:
            raise SerializationError(f"invalid job payload: {exc}") from exc
        if not isinstance(d, dict):
            raise SerializationError(f"job payload must be a JSON object, got {type(d).__name__}")
        try:
            return cls(
                queue=d.get("queue", ""),
                class_=d["class"],
                args=d.get("args"),
                jid=d["jid"],
                enqueued_at=d["enqueued_at"],
                options=EnqueueOptions(
                    retry_count=d.get("retry_count", 0),
                    retry=d.get("retry", False),
                    at=d.get("at", 0.0),
                ),
            )
        except KeyError as exc:
            raise SerializationError(f"job payload is missing {exc}") from exc


def build_envelope(
    queue: str,
    class_: str,
    args: Any,
    options: EnqueueOptions,
    jid: str,
    now: float,
) -> EnqueueData:
    """Assemble the record for one enqueue call; ``jid`` and ``now`` come from the caller."""
    return EnqueueData(
        queue=queue,
        class_=class_,
        args=args,
        jid=jid,
        enqueued_at=now,
        options=EnqueueOptions(
            retry_count=options.retry_count,
            retry=options.retry,
            at=options.at,
        ),
    )
