"""
sweepscope.buffer
=================

Time-windowed store of live detections.

A detection is kept in polar units (angle°, distance cm) together with the
monotonic millisecond timestamp at which it was admitted.  Its alpha is
never stored; it is recomputed on every read as

    alpha = max(0, 1 - (now - captured_at) / fade_time)

Entries are appended in capture order, so the oldest entry is always the
first one to expire and eviction only ever pops from the left.

The serial / MQTT / simulator readers call `insert()` from their own
threads while the render loop calls `evict_expired()` and `snapshot()`,
so every public method runs under one lock.
"""
from __future__ import annotations

import math
import numbers
import threading
import time
from collections import deque
from typing import Deque, List, NamedTuple, Optional, Tuple

from sweepscope.config import ConfigError
from sweepscope.constants import FADE_TIME_MS, MAX_RANGE_CM


def now_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


class Detection(NamedTuple):
    angle: int
    distance: float
    captured_at: float                  # ms, monotonic


def _positive(name: str, value) -> float:
    if (isinstance(value, bool) or not isinstance(value, numbers.Real)
            or not math.isfinite(value) or value <= 0):
        raise ConfigError(f"{name} must be a positive number, got {value!r}")
    return value


class DetectionBuffer:
    def __init__(self, max_range: float = MAX_RANGE_CM,
                 fade_time: float = FADE_TIME_MS) -> None:
        self._max_range: float = _positive("max_range", max_range)
        self._fade_time: float = _positive("fade_time", fade_time)
        self._items: Deque[Detection] = deque()
        self._lock = threading.Lock()
        self.sweep_angle: int = 0

    # ───────────────────────── configuration
    @property
    def max_range(self) -> float:
        return self._max_range

    @property
    def fade_time(self) -> float:
        return self._fade_time

    def set_max_range(self, value: float) -> None:
        """Only affects admission of later samples; stored entries stay."""
        self._max_range = _positive("max_range", value)

    def set_fade_time(self, value: float, now: Optional[float] = None) -> None:
        """Applies to every entry at once, so a shrink may expire some now."""
        value = _positive("fade_time", value)
        with self._lock:
            self._fade_time = value
            self._evict(now_ms() if now is None else now)

    # ───────────────────────── public API
    def alpha(self, det: Detection, now: float) -> float:
        return min(1.0, max(0.0, 1.0 - (now - det.captured_at) / self._fade_time))

    def insert(self, angle: int, distance: float, now: Optional[float] = None) -> bool:
        """
        Record one sample.

        The sweep angle always follows the sensor; the sample itself is
        admitted only when 0 < distance <= max_range.  Returns True if a
        detection was stored.
        """
        now = now_ms() if now is None else now
        with self._lock:
            self.sweep_angle = angle
            admitted = 0 < distance <= self._max_range
            if admitted:
                self._items.append(Detection(angle, distance, now))
            self._evict(now)
            return admitted

    def evict_expired(self, now: Optional[float] = None) -> int:
        """Drop every detection whose alpha reached 0; returns how many."""
        with self._lock:
            return self._evict(now_ms() if now is None else now)

    def snapshot(self, now: Optional[float] = None) -> List[Tuple[Detection, float]]:
        """Live detections in insertion order, each with its current alpha."""
        now = now_ms() if now is None else now
        with self._lock:
            out = []
            for det in self._items:
                a = self.alpha(det, now)
                if a > 0:
                    out.append((det, a))
            return out

    def __len__(self) -> int:
        return len(self._items)

    # ───────────────────────── internal helpers
    def _evict(self, now: float) -> int:
        n = 0
        while self._items and self.alpha(self._items[0], now) <= 0:
            self._items.popleft()
            n += 1
        return n
