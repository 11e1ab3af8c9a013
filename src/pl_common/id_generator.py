"""Snowflake-style ID generator for league entity IDs.

IDs are prefixed by entity kind so they read well in logs and payment
references: "chl_<snowflake>", "pot_<snowflake>", "stl_<snowflake>".
"""

import threading
import time


class SnowflakeIdGenerator:
    """Simple snowflake ID generator.

    Layout (64 bits):
      - 41 bits: millisecond timestamp (since custom epoch)
      - 10 bits: worker_id (0-1023)
      - 12 bits: sequence (0-4095 per millisecond)
    """

    _EPOCH_MS = 1_735_689_600_000  # 2025-01-01
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

    def next_int(self) -> int:
        with self._lock:
            now_ms = int(time.time() * 1000)
            if now_ms == self._last_ms:
                self._sequence = (self._sequence + 1) & self._MAX_SEQUENCE
                if self._sequence == 0:
                    while now_ms <= self._last_ms:
                        now_ms = int(time.time() * 1000)
            else:
                self._sequence = 0
            self._last_ms = now_ms
            return (
                ((now_ms - self._EPOCH_MS) << (self._WORKER_BITS + self._SEQUENCE_BITS))
                | (self._worker_id << self._SEQUENCE_BITS)
                | self._sequence
            )


_default_generator = SnowflakeIdGenerator()


def generate_id(prefix: str) -> str:
    """Generate a unique, time-ordered string ID such as 'chl_1234567890'."""
    return f"{prefix}_{_default_generator.next_int()}"
