"""Job id generation."""

from __future__ import annotations

import secrets

from enqueuer.errors import JidGenerationError

JID_BYTES = 12


def generate_jid() -> str:
    """Return 12 random bytes as a 24 character lowercase hex string."""
    try:
        raw = secrets.token_bytes(JID_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise JidGenerationError(f"random source unavailable: {exc}") from exc
    if len(raw) != JID_BYTES:
        raise JidGenerationError(f"random source returned {len(raw)} bytes, expected {JID_BYTES}")
    return raw.hex()
