"""
sweepscope.scope
================

Rendering engine for the sweep display.

`RadarScope` owns the detection buffer and draws one frame per call to
`frame()`:

    1. clear to background
    2. grid, range rings (¼ … 1 × radius) and angle spokes every 30°
    3. fading detection blips (glow + solid core, both scaled by alpha)
    4. the sweep beam: a wedge trailing the current angle + a bright edge
    5. the origin marker

The engine is either *running* or *stopped*.  A stopped engine ignores
`frame()` calls, so a frame that was already scheduled when `stop()` ran
draws nothing.  Nothing in a frame is allowed to escape: a blip that
cannot be drawn is skipped, and a failing frame is abandoned and logged.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Tuple

import pygame

from sweepscope import constants as C
from sweepscope.buffer import DetectionBuffer, now_ms
from sweepscope.projection import DisplayGeometry, geometry_for_size, project

log = logging.getLogger(__name__)

GeometryProvider = Callable[[Tuple[int, int]], DisplayGeometry]

# what a stale / zero-sized surface mid-resize can throw at us
_DRAW_ERRORS = (pygame.error, ValueError, TypeError, OverflowError, ZeroDivisionError)


class RadarScope:
    def __init__(self, surface: pygame.Surface,
                 max_range: float = C.MAX_RANGE_CM,
                 fade_time: float = C.FADE_TIME_MS,
                 geometry_provider: GeometryProvider = geometry_for_size,
                 clock: Callable[[], float] = now_ms) -> None:
        self.buffer = DetectionBuffer(max_range, fade_time)
        self.geometry_provider = geometry_provider
        self.clock = clock
        self.running = False
        self.frames = 0
        self.surface: pygame.Surface
        self.geom: DisplayGeometry
        self.resize(surface)

    # ───────────────────────── configuration
    @property
    def max_range(self) -> float:
        return self.buffer.max_range

    @property
    def fade_time(self) -> float:
        return self.buffer.fade_time

    @property
    def sweep_angle(self) -> int:
        return self.buffer.sweep_angle

    def set_max_range(self, value: float) -> None:
        self.buffer.set_max_range(value)
        log.info("scope: max range %s cm", value)

    def set_fade_time(self, value: float) -> None:
        self.buffer.set_fade_time(value, self.clock())
        log.info("scope: fade time %s ms", value)

    def resize(self, surface: pygame.Surface) -> None:
        """Adopt a new target surface and recompute the display geometry."""
        self.surface = surface
        self.geom = self.geometry_provider(surface.get_size())

    # ───────────────────────── data in
    def add_detection(self, angle: int, distance: float) -> bool:
        return self.buffer.insert(angle, distance, self.clock())

    # ───────────────────────── loop state
    def start(self) -> None:
        self.running = True

    def stop(self) -> None:
        self.running = False

    def frame(self, now: Optional[float] = None) -> bool:
        """Draw one frame; returns False when stopped or the frame failed."""
        if not self.running:
            return False
        now = self.clock() if now is None else now
        try:
            self.draw(now)
        except _DRAW_ERRORS as exc:
            log.warning("scope: frame skipped: %s", exc)
            return False
        self.frames += 1
        return True

    # ───────────────────────── drawing
    def draw(self, now: float) -> None:
        self.surface.fill(C.BLACK)
        self.draw_grid()
        self.draw_range_rings()
        self.draw_angle_lines()
        self.draw_detections(now)
        self.draw_beam()
        self.draw_center()

    def draw_grid(self) -> None:
        w, h = self.surface.get_size()
        for x in range(0, w, C.GRID_STEP):
            pygame.draw.line(self.surface, C.GRID, (x, 0), (x, h))
        for y in range(0, h, C.GRID_STEP):
            pygame.draw.line(self.surface, C.GRID, (0, y), (w, y))

    def draw_range_rings(self) -> None:
        g = self.geom
        for frac in C.RANGE_FRACTIONS:
            r = g.radius * frac
            if r >= 1:
                rect = pygame.Rect(0, 0, int(2 * r), int(2 * r))
                rect.center = (int(g.center_x), int(g.center_y))
                pygame.draw.arc(self.surface, C.DIM, rect, 0, math.pi)
            self._label(f"{round(self.max_range * frac)}cm", C.SMALL_FONT, C.GREEN,
                        (g.center_x, g.center_y - r - 8))

    def draw_angle_lines(self) -> None:
        g = self.geom
        label_geom = g._replace(radius=g.radius + 20)
        for ang in C.ANGLE_MARKS:
            edge = project(ang, 1, 1, g)
            pygame.draw.line(self.surface, C.DIM, (g.center_x, g.center_y), edge)
            self._label(f"{ang}°", C.FONT, C.GREEN, project(ang, 1, 1, label_geom))

    def draw_detections(self, now: float) -> int:
        self.buffer.evict_expired(now)
        drawn = 0
        for det, alpha in self.buffer.snapshot(now):
            try:
                x, y = project(det.angle, det.distance, self.max_range, self.geom)
                self._blip(x, y, alpha)
            except _DRAW_ERRORS as exc:
                log.debug("scope: skipped detection %s: %s", det, exc)
                continue
            drawn += 1
        return drawn

    def beam_polygon(self) -> List[Tuple[float, float]]:
        """Origin plus the outer arc of the wedge trailing the sweep angle."""
        g, ang = self.geom, self.sweep_angle
        steps = C.BEAM_WIDTH_DEG // 2
        arc = [project(ang - C.BEAM_WIDTH_DEG * i / steps, 1, 1, g)
               for i in range(steps + 1)]
        return [(g.center_x, g.center_y)] + arc

    def draw_beam(self) -> None:
        g = self.geom
        if g.radius >= 1:
            wedge = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)
            pygame.draw.polygon(wedge, C.GREEN + (60,), self.beam_polygon())
            self.surface.blit(wedge, (0, 0))
        tip = project(self.sweep_angle, 1, 1, g)
        pygame.draw.line(self.surface, C.GREEN, (g.center_x, g.center_y), tip, 2)

    def draw_center(self) -> None:
        g = self.geom
        self._glow(g.center_x, g.center_y, C.ORIGIN_GLOW, C.GREEN, 0.8)
        pygame.draw.circle(self.surface, C.GREEN,
                           (int(g.center_x), int(g.center_y)), C.ORIGIN_DOT)

    # ───────────────────────── helpers
    def _blip(self, x: float, y: float, alpha: float) -> None:
        self._glow(x, y, C.GLOW_RADIUS, C.RED, alpha * 0.6)
        self._glow(x, y, C.DOT_RADIUS, C.WHITE, alpha)

    def _glow(self, x: float, y: float, radius: int, col, alpha: float) -> None:
        size = radius * 2
        dot = pygame.Surface((size, size), pygame.SRCALPHA)
        pygame.draw.circle(dot, col + (int(255 * alpha),), (radius, radius), radius)
        self.surface.blit(dot, (int(x) - radius, int(y) - radius))

    def _label(self, text: str, font: pygame.font.Font, col, pos) -> None:
        surf = font.render(text, True, col)
        self.surface.blit(surf, surf.get_rect(center=(int(pos[0]), int(pos[1]))))
