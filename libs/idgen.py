from __future__ import annotations

import os
import threading
import time
from typing import ClassVar


class SnowflakeGenerator:
    """Generate sortable 64-bit IDs: 41 bits of milliseconds, 10 bits of node, 12 bits of sequence."""

    _epoch: ClassVar[int] = 1_704_151_200_000  # 2023-12-31
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, node_id: int = 1) -> None:
        if not 0 <= node_id < 1024:
            raise ValueError("node_id must be between 0 and 1023")
        self.node_id = node_id
        self._last_ts = -1
        self._sequence = 0

    def _timestamp(self) -> int:
        return int(time.time() * 1000)

    def get_id(self) -> int:
        with self._lock:
            ts = self._timestamp()
            if ts < self._last_ts:
                # clock moved backwards
                ts = self._wait_next(self._last_ts)

            if ts == self._last_ts:
                self._sequence = (self._sequence + 1) & 0xFFF
                if self._sequence == 0:
                    ts = self._wait_next(ts)
            else:
                self._sequence = 0

            self._last_ts = ts
            return ((ts - self._epoch) << 22) | (self.node_id << 12) | self._sequence

    def _wait_next(self, last_ts: int) -> int:
        ts = self._timestamp()
        while ts <= last_ts:
            time.sleep(0.0001)
            ts = self._timestamp()
        return ts


_GENERATORS: dict[int, SnowflakeGenerator] = {}
_REGISTRY_LOCK = threading.Lock()


def default_node_id() -> int:
    return int(os.getenv("ID_NODE", "1"))


def generate_id(node_id: int | None = None) -> int:
    node = default_node_id() if node_id is None else node_id
    with _REGISTRY_LOCK:
        generator = _GENERATORS.get(node)
        if generator is None:
            generator = SnowflakeGenerator(node_id=node)
            _GENERATORS[node] = generator
    return generator.get_id()


def parse_id(value: object) -> int | None:
    """Coerce an opaque wire id (string or int) to a primary key, or None if malformed."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isascii() and stripped.isdigit():
            parsed = int(stripped)
            return parsed if parsed > 0 else None
    return None
