"""
sweepscope.simulator
====================

Synthetic stand-in for the servo + ranger hardware.

The virtual sensor steps back and forth across 0…180° (bouncing at each
bound, never wrapping) and "sees" a handful of random obstacles, each
covering `angle ± width` degrees at a fixed distance.  Hits get a little
noise; empty directions read `max_distance` apart from the occasional
spurious echo.
"""
from __future__ import annotations

import logging
import random
import threading
from typing import List, NamedTuple, Optional

from sweepscope.constants import MAX_ANGLE, MAX_RANGE_CM
from sweepscope.sources import SampleSource

log = logging.getLogger(__name__)


class Obstacle(NamedTuple):
    angle: int
    distance: int
    width: int                          # angular half-width, degrees


class DataSimulator(SampleSource):
    NOISE_CM      = 10                  # peak-to-peak noise on a hit
    SPURIOUS_PROB = 0.05

    def __init__(self, scan_speed: float = 50, angle_step: int = 1,
                 max_distance: int = MAX_RANGE_CM,
                 rng: Optional[random.Random] = None) -> None:
        super().__init__()
        self.scan_speed   = scan_speed          # ms between steps
        self.angle_step   = angle_step
        self.max_distance = max_distance
        self.rng          = rng or random.Random()

        self.current_angle = 0
        self.direction     = 1                  # +1 forward, -1 backward
        self.obstacles: List[Obstacle] = self.generate_obstacles()

        self._stop   = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ───────────────────────── obstacles
    def generate_obstacles(self) -> List[Obstacle]:
        rnd = self.rng
        return [Obstacle(angle=rnd.randrange(0, 180),
                         distance=50 + rnd.randrange(0, 300),
                         width=10 + rnd.randrange(0, 20))
                for _ in range(5 + rnd.randrange(0, 5))]

    def regenerate_obstacles(self) -> None:
        self.obstacles = self.generate_obstacles()

    # ───────────────────────── public API
    def start(self) -> None:
        if self.is_running:
            return
        self.current_angle, self.direction = 0, 1
        self.obstacles = self.generate_obstacles()
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, daemon=True,
                                        name="simulator")
        self._thread.start()
        log.info("simulator: started with %d obstacles", len(self.obstacles))
        self._set_status(True)

    def stop(self) -> None:
        self._stop.set()
        t = self._thread
        if t and t.is_alive() and t is not threading.current_thread():
            t.join(timeout=1)
        if self.connected:
            self._set_status(False)

    @property
    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive() and not self._stop.is_set())

    def set_scan_speed(self, speed: float) -> None:
        self.scan_speed = speed
        if self.is_running:
            self.stop()
            self.start()

    def step(self) -> int:
        """Advance one tick, emit the sample and return the new angle."""
        self.current_angle += self.angle_step * self.direction

        if self.current_angle >= MAX_ANGLE:
            self.current_angle, self.direction = MAX_ANGLE, -1
        elif self.current_angle <= 0:
            self.current_angle, self.direction = 0, 1

        self._emit(self.current_angle, self.calculate_distance(self.current_angle))
        return self.current_angle

    def calculate_distance(self, angle: int) -> int:
        nearest = float(self.max_distance)
        hit = False

        for ob in self.obstacles:
            if abs(angle - ob.angle) <= ob.width:
                noise = (self.rng.random() - 0.5) * self.NOISE_CM
                nearest = min(nearest, max(0.0, ob.distance + noise))
                hit = True

        if not hit and self.rng.random() < self.SPURIOUS_PROB:
            nearest = 100 + self.rng.randrange(0, 300)

        return round(nearest)

    # ───────────────────────── background ticker
    def _loop(self):
        while not self._stop.wait(self.scan_speed / 1000):
            self.step()
