"""
sweepscope.sources
==================

Common ground for everything that produces `(angle, distance)` samples:
the serial reader, the MQTT reader and the simulator.

Record format (serial & MQTT)
-----------------------------
One text record per line:

    "<angle>,<distance>"      e.g.  "90,245"

Whitespace around either field is ignored.  Records that do not parse,
or whose angle lies outside 0…180° / distance is negative, are dropped
without raising.  Distances of 0 or beyond the display range are *not*
filtered here; the detection buffer decides what to keep.
"""
from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Callable, Iterator, Optional, Tuple

from sweepscope.constants import MAX_ANGLE

log = logging.getLogger(__name__)

MAX_LINE = 256                               # bytes kept while waiting for "\n"

SampleCallback = Callable[[int, int], None]
StatusCallback = Callable[[bool], None]


def _to_int(text: str) -> Optional[int]:
    try:
        val = float(text)
    except ValueError:
        return None
    if not math.isfinite(val):
        return None
    return int(val)


def parse_line(line: str) -> Optional[Tuple[int, int]]:
    """Return `(angle, distance)` for a well-formed record, else None."""
    parts = line.strip().split(",")
    if len(parts) != 2:
        return None
    angle, distance = _to_int(parts[0].strip()), _to_int(parts[1].strip())
    if angle is None or distance is None:
        return None
    if not 0 <= angle <= MAX_ANGLE or distance < 0:
        return None
    return angle, distance


class LineSplitter:
    """Reassemble newline-terminated records from arbitrary byte chunks."""

    def __init__(self) -> None:
        self.buf = bytearray()

    def feed(self, chunk: bytes) -> Iterator[str]:
        self.buf += chunk
        while True:
            idx = self.buf.find(b"\n")
            if idx == -1:
                if len(self.buf) > MAX_LINE:
                    del self.buf[:-MAX_LINE]         # no newline in sight, keep the tail
                return
            raw = bytes(self.buf[:idx])
            del self.buf[: idx + 1]                  # drop line + "\n"
            yield raw.decode("ascii", errors="ignore").strip()


class SampleSource(ABC):
    """
    Base class for sample producers.

    Exactly one sample callback is held; registering again replaces it.
    """

    def __init__(self) -> None:
        self._on_sample: Optional[SampleCallback] = None
        self._on_status: Optional[StatusCallback] = None
        self.connected = False

    def on_sample(self, callback: SampleCallback) -> None:
        self._on_sample = callback

    def on_status_change(self, callback: StatusCallback) -> None:
        self._on_status = callback

    @abstractmethod
    def start(self) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @property
    @abstractmethod
    def is_running(self) -> bool:
        ...

    # ───────────────────────── helpers for subclasses
    def _emit(self, angle: int, distance: int) -> None:
        if self._on_sample:
            self._on_sample(angle, distance)

    def _emit_line(self, line: str) -> bool:
        if not line:
            return False
        sample = parse_line(line)
        if sample is None:
            log.debug("dropping malformed record %r", line)
            return False
        self._emit(*sample)
        return True

    def _set_status(self, connected: bool) -> None:
        self.connected = connected
        if self._on_status:
            self._on_status(connected)
