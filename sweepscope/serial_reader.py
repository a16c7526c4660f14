"""
sweepscope.serial_reader
========================

Non-blocking line reader for a sweep sensor on a local serial port
(typically an Arduino driving a servo + ultrasonic ranger at 9600 8N1).

Each line is an `"<angle>,<distance>"` record, see `sweepscope.sources`.

Usage
-----
    reader = RadarSerial("/dev/ttyACM0", 9600)
    reader.on_sample(lambda angle, dist: ...)
    reader.start()     # spawns a background thread
    reader.stop()      # clean shutdown
"""
from __future__ import annotations

import logging
import threading

import serial

from sweepscope.sources import LineSplitter, SampleSource

log = logging.getLogger(__name__)


class RadarSerial(SampleSource):
    TIMEOUT = 0.05                      # s, read timeout so stop() is noticed

    def __init__(self, port: str, baud: int = 9600):
        super().__init__()
        self.port, self.baud = port, baud
        self._lines   = LineSplitter()
        self._stop    = threading.Event()
        self._thread: threading.Thread | None = None

    # ───────────────────────── public API
    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._lines = LineSplitter()
        self._thread = threading.Thread(target=self._loop, daemon=True,
                                        name=f"serial-{self.port}")
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        t = self._thread
        if t and t.is_alive() and t is not threading.current_thread():
            t.join(timeout=1)

    @property
    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def feed(self, chunk: bytes) -> int:
        """Push raw bytes through the line parser; returns samples emitted."""
        return sum(self._emit_line(line) for line in self._lines.feed(chunk))

    # ───────────────────────── background reader thread
    def _loop(self):
        try:
            with serial.Serial(self.port, self.baud, bytesize=serial.EIGHTBITS,
                               parity=serial.PARITY_NONE,
                               stopbits=serial.STOPBITS_ONE,
                               timeout=self.TIMEOUT) as ser:
                log.info("serial: opened %s @ %d baud", self.port, self.baud)
                self._set_status(True)
                while not self._stop.is_set():
                    chunk = ser.read(ser.in_waiting or 1)
                    if chunk:
                        self.feed(chunk)
        except serial.SerialException as exc:
            log.error("serial: %s: %s", self.port, exc)
        finally:
            if self.connected:
                log.info("serial: closed %s", self.port)
            self._set_status(False)
