"""
sweepscope.gui
==============

Sweep-radar window – simulator / serial / MQTT input.

Key features
------------
• Fading detections and a sweep beam drawn by `RadarScope`
• Clickable menu row: SIM / SERIAL / MQTT input, PAUSE, NEW OBSTACLES
• Live readouts: angle, last distance, range, fade time, link status
• Hot-keys for range (↑/↓) and fade time (←/→)
"""

from __future__ import annotations
import functools
import logging
import pygame

from sweepscope import constants as C
from sweepscope.config import INPUT_MODES, ConfigError
from sweepscope.mqtt_client import RadarMQTT
from sweepscope.projection import geometry_for_size
from sweepscope.scope import RadarScope
from sweepscope.serial_reader import RadarSerial
from sweepscope.simulator import DataSimulator
from sweepscope.sources import SampleSource

log = logging.getLogger(__name__)


class RadarGUI:
    RANGE_STEP, FADE_STEP = 50, 500     # cm, ms per key press

    # ────────────────────────────────────────────────── INIT
    def __init__(self, cfg: dict) -> None:
        self.cfg = cfg

        # ―― Pygame window
        self.screen = pygame.display.set_mode(tuple(cfg["window"]), pygame.RESIZABLE)
        pygame.display.set_caption("SweepScope")
        self.clock = pygame.time.Clock()
        self.full_screen = False
        self.menu_rects: dict[str, pygame.Rect] = {}

        # ―― Rendering engine
        provider = functools.partial(geometry_for_size,
                                     top=C.TOP_PAD_N, bottom=C.BOTTOM_PAD_N)
        self.scope = RadarScope(self.screen, cfg["max_range"], cfg["fade_time"],
                                geometry_provider=provider)
        self.scope.start()

        # ―― Input mode & reader
        self.input_mode = cfg["input_mode"]
        self.latest: tuple[int, int] | None = None          # (angle, distance)
        self.connected = False
        self.reader: SampleSource
        self._open_input()

    # ───────────────────────────────────────── helper – open data source
    def _make_reader(self) -> SampleSource:
        cfg = self.cfg
        if self.input_mode == "serial":
            return RadarSerial(cfg["serial_port"], int(cfg["serial_baud"]))
        if self.input_mode == "mqtt":
            return RadarMQTT(cfg["broker"], int(cfg["port"]), cfg["topic"])
        return DataSimulator(cfg["scan_speed"], int(cfg["angle_step"]))

    def _open_input(self):
        # close previous
        if hasattr(self, "reader"):
            self.reader.stop()
        # open new
        self.connected = False
        self.reader = self._make_reader()
        self.reader.on_sample(self._on_sample)
        self.reader.on_status_change(self._on_status)
        self.reader.start()
        log.info("input: %s", self.input_mode)

    def _switch_input(self, mode: str):
        if mode != self.input_mode:
            self.input_mode = mode
            self._open_input()

    # ───────────────────────────────────────── reader callbacks
    def _on_sample(self, angle: int, distance: int):
        self.scope.add_detection(angle, distance)
        self.latest = (angle, distance)

    def _on_status(self, connected: bool):
        self.connected = connected

    # ───────────────────────────────────────── settings
    def _change_range(self, delta: int):
        try:
            self.scope.set_max_range(self.scope.max_range + delta)
        except ConfigError as exc:
            log.warning("range unchanged: %s", exc)

    def _change_fade(self, delta: int):
        try:
            self.scope.set_fade_time(self.scope.fade_time + delta)
        except ConfigError as exc:
            log.warning("fade time unchanged: %s", exc)

    def _toggle_pause(self):
        if self.scope.running:
            self.scope.stop()
        else:
            self.scope.start()

    def _regenerate(self):
        if isinstance(self.reader, DataSimulator):
            self.reader.regenerate_obstacles()

    def _sync_cfg(self):
        self.cfg.update(input_mode=self.input_mode,
                        max_range=self.scope.max_range,
                        fade_time=self.scope.fade_time)
        if not self.full_screen:
            self.cfg["window"] = list(self.screen.get_size())

    # ───────────────────────────────────────── status text
    def status_text(self) -> str:
        if self.input_mode == "sim":
            return "Simulating"
        return "Connected" if self.connected else "Disconnected"

    def readout_text(self) -> str:
        if self.latest is None:
            ang, dist = "--°", "-- cm"
        else:
            ang = f"{self.latest[0]}°"
            dist = f"{self.latest[1]} cm" if self.latest[1] > 0 else "-- cm"
        return (f"ANGLE {ang}  DISTANCE {dist}  "
                f"RANGE {self.scope.max_range:g} cm  FADE {self.scope.fade_time:g} ms")

    # ───────────────────────────────────────── menu row
    def _menu_row(self):
        r, x, y = {}, self.screen.get_width() - 10, C.HEADER_GAP
        def add(label, key, col=C.GREEN):
            nonlocal x
            surf = C.FONT.render(label, True, col); rr = surf.get_rect(); rr.topright = (x, y)
            self.screen.blit(surf, rr); r[key] = rr; x = rr.left - 20
        if self.input_mode == "sim":
            add("NEW OBSTACLES", "regen")
        add("RESUME" if not self.scope.running else "PAUSE", "pause")
        for mode in reversed(INPUT_MODES):
            add(mode.upper(), mode, C.GREEN if mode == self.input_mode else C.DIM)
        self.menu_rects = r

    def _draw_hud(self):
        self.screen.blit(C.BIG_FONT.render(C.TITLE, True, C.GREEN), (10, C.HEADER_GAP))
        self._menu_row()

        h = self.screen.get_height()
        readout = C.FONT.render(self.readout_text(), True, C.GREEN)
        self.screen.blit(readout, (10, h - readout.get_height() * 2 - C.HEADER_GAP * 2))

        status = self.status_text()
        col = {"Simulating": C.AMBER, "Connected": C.GREEN}.get(status, C.RED)
        self.screen.blit(C.FONT.render(status, True, col),
                         (10, h - readout.get_height() - C.HEADER_GAP))

    # ───────────────────────────────────────── events
    def _handle_click(self, pos) -> None:
        for key, rect in self.menu_rects.items():
            if not rect.collidepoint(pos):
                continue
            if key in INPUT_MODES:
                self._switch_input(key)
            elif key == "pause":
                self._toggle_pause()
            elif key == "regen":
                self._regenerate()
            return

    def _handle_key(self, key) -> bool:
        """Return False when the key asks to quit."""
        if key in (pygame.K_q, pygame.K_ESCAPE):
            return False
        if key == pygame.K_f:
            pygame.display.toggle_fullscreen()
            self.full_screen = not self.full_screen
            self.screen = pygame.display.get_surface()
            self.scope.resize(self.screen)
        elif key == pygame.K_SPACE:
            self._toggle_pause()
        elif key == pygame.K_UP:
            self._change_range(self.RANGE_STEP)
        elif key == pygame.K_DOWN:
            self._change_range(-self.RANGE_STEP)
        elif key == pygame.K_RIGHT:
            self._change_fade(self.FADE_STEP)
        elif key == pygame.K_LEFT:
            self._change_fade(-self.FADE_STEP)
        elif key == pygame.K_r:
            self._regenerate()
        elif key == pygame.K_i:
            nxt = INPUT_MODES[(INPUT_MODES.index(self.input_mode) + 1) % len(INPUT_MODES)]
            self._switch_input(nxt)
        return True

    # ───────────────────────────────────────── MAIN LOOP
    def step(self) -> bool:
        """One pass of events + drawing; returns False once asked to quit."""
        running = True
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.VIDEORESIZE and not self.full_screen:
                self.screen = pygame.display.set_mode(e.size, pygame.RESIZABLE)
                self.scope.resize(self.screen)
            elif e.type == pygame.KEYDOWN:
                running = self._handle_key(e.key) and running
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                self._handle_click(e.pos)

        if not self.scope.frame():
            # paused: keep the last sweep, repaint header & footer only
            w, h = self.screen.get_size()
            self.screen.fill(C.BLACK, (0, 0, w, C.TOP_PAD_N))
            self.screen.fill(C.BLACK, (0, h - C.BOTTOM_PAD_N, w, C.BOTTOM_PAD_N))
        self._draw_hud()
        pygame.display.flip()
        return running

    def run(self):
        fps = int(self.cfg.get("fps", 60))
        while self.step():
            self.clock.tick(fps)

        # graceful shutdown
        self._sync_cfg()
        self.scope.stop()
        self.reader.stop()
