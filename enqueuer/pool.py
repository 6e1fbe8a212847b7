"""Sentinel connection pool that waits for a free connection instead of failing.

redis-py only ships a blocking pool for fixed addresses; its sentinel pool raises once
``max_connections`` are checked out. This one gates checkouts on a condition the way
``redis.BlockingConnectionPool`` gates them on its queue.
"""

from __future__ import annotations

import threading
from typing import Optional

from redis.exceptions import ConnectionError
from redis.sentinel import SentinelConnectionPool


class BlockingSentinelConnectionPool(SentinelConnectionPool):
    def __init__(self, service_name, sentinel_manager, timeout: Optional[float] = None, **kwargs):
        super().__init__(service_name, sentinel_manager, **kwargs)
        self.timeout = timeout  # None waits forever
        self._checked_out = 0
        self._available = threading.Condition()
        self._local = threading.local()

    def _has_capacity(self) -> bool:
        return self._checked_out < self.max_connections

    def _give_back(self) -> None:
        with self._available:
            self._checked_out = max(0, self._checked_out - 1)
            self._available.notify()

    def get_connection(self, *args, **kwargs):
        with self._available:
            if not self._available.wait_for(self._has_capacity, timeout=self.timeout):
                raise ConnectionError("No connection available.")
            self._checked_out += 1
        self._local.checking_out = True
        try:
            return super().get_connection(*args, **kwargs)
        except BaseException:
            # a failed connect inside the base class already went through release()
            if self._local.checking_out:
                self._give_back()
            raise
        finally:
            self._local.checking_out = False

    def release(self, connection) -> None:
        try:
            super().release(connection)
        finally:
            self._local.checking_out = False
            self._give_back()
