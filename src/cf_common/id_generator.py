"""Snowflake-style BIGINT ids for movements and inventories.

Ids are roughly time-ordered, which is what keyset pagination (``id < cursor``)
relies on. They are NOT the inventory tie-breaker: several app instances can
interleave, so "latest inventory" uses the database's own seq column.
"""

import threading
import time


class SnowflakeIdGenerator:
    """Layout (63 bits, always positive in a BIGINT):
      - 41 bits: millisecond timestamp since _EPOCH_MS
      - 10 bits: worker_id (0-1023)
      - 12 bits: sequence (0-4095 per millisecond)
    """

    _EPOCH_MS = 1_735_689_600_000  # 2025-01-01T00:00:00Z
    _WORKER_BITS = 10
    _SEQUENCE_BITS = 12
    _MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1

    def __init__(self, worker_id: int = 0) -> None:
        if not (0 <= worker_id < (1 << self._WORKER_BITS)):
            raise ValueError(f"worker_id must be 0-{(1 << self._WORKER_BITS) - 1}")
        self._worker_id = worker_id
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            now_ms = self._current_ms()
            if now_ms < self._last_ms:
                # clock stepped back: keep issuing from the last seen millisecond
                now_ms = self._last_ms
            if now_ms == self._last_ms:
                self._sequence = (self._sequence + 1) & self._MAX_SEQUENCE
                if self._sequence == 0:
                    now_ms = self._wait_next_ms(now_ms)
            else:
                self._sequence = 0

            self._last_ms = now_ms
            return (
                ((now_ms - self._EPOCH_MS) << (self._WORKER_BITS + self._SEQUENCE_BITS))
                | (self._worker_id << self._SEQUENCE_BITS)
                | self._sequence
            )

    def _current_ms(self) -> int:
        return time.time_ns() // 1_000_000

    def _wait_next_ms(self, last_ms: int) -> int:
        now_ms = self._current_ms()
        while now_ms <= last_ms:
            now_ms = self._current_ms()
        return now_ms
