import pygame
import pytest

from sweepscope import constants as C
from sweepscope.config import ConfigError
from sweepscope.projection import project
from sweepscope.scope import RadarScope


def _park_beam(scope):
    # distance 0 is never stored but moves the beam away from the blips
    scope.add_detection(150, 0)


def _pixel_at(scope, angle, distance):
    x, y = project(angle, distance, scope.max_range, scope.geom)
    return scope.surface.get_at((int(x), int(y)))[:3]


class TestLoopState:
    def test_starts_stopped(self, surface):
        sc = RadarScope(surface)
        assert not sc.running
        assert not sc.frame()

    def test_start_is_idempotent(self, scope):
        scope.start()
        scope.start()
        assert scope.running
        assert scope.frame()
        assert scope.frames == 1

    def test_frame_after_stop_draws_nothing(self, scope, surface):
        surface.fill((1, 2, 3))
        scope.stop()
        assert not scope.frame()
        assert surface.get_at((5, 5))[:3] == (1, 2, 3)
        assert scope.frames == 0


class TestFrame:
    def test_clears_to_background(self, scope, surface):
        surface.fill((200, 0, 200))
        scope.frame()
        assert surface.get_at((1, 1))[:3] in (C.BLACK, C.GRID)

    def test_fresh_detection_draws_a_white_core(self, scope, clock):
        scope.add_detection(45, 200)
        _park_beam(scope)
        scope.frame()
        assert _pixel_at(scope, 45, 200) == C.WHITE

    def test_expired_detection_is_evicted_and_not_drawn(self, scope, clock):
        scope.add_detection(45, 200)
        _park_beam(scope)
        clock.t = 3000
        scope.frame()
        assert len(scope.buffer) == 0
        assert _pixel_at(scope, 45, 200) != C.WHITE

    def test_glyph_fades_with_alpha(self, scope, clock):
        scope.add_detection(45, 200)
        _park_beam(scope)
        scope.frame()
        bright = _pixel_at(scope, 45, 200)
        clock.t = 2500
        scope.frame()
        dim = _pixel_at(scope, 45, 200)
        assert sum(dim) < sum(bright)

    def test_beam_follows_out_of_range_sample(self, scope):
        scope.add_detection(90, 5000)
        assert scope.sweep_angle == 90
        assert len(scope.buffer) == 0
        poly = scope.beam_polygon()
        assert poly[0] == (scope.geom.center_x, scope.geom.center_y)
        assert poly[1] == pytest.approx(project(90, 1, 1, scope.geom))
        assert len(poly) == C.BEAM_WIDTH_DEG // 2 + 2

    def test_origin_marker_is_drawn(self, scope):
        scope.frame()
        g = scope.geom
        assert scope.surface.get_at((int(g.center_x), int(g.center_y)))[:3] == C.GREEN


class TestFailureTolerance:
    def test_one_bad_detection_does_not_stop_the_others(self, scope, monkeypatch):
        scope.add_detection(30, 100)
        scope.add_detection(150, 100)
        real_blip = RadarScope._blip
        calls = []

        def flaky(self, x, y, alpha):
            calls.append((x, y))
            if len(calls) == 1:
                raise pygame.error("surface lost")
            real_blip(self, x, y, alpha)

        monkeypatch.setattr(RadarScope, "_blip", flaky)
        assert scope.draw_detections(0) == 1
        assert scope.frame()
        assert len(calls) == 4

    def test_failing_frame_is_skipped_and_loop_survives(self, scope, monkeypatch):
        def boom(self):
            raise ValueError("zero-sized surface")

        monkeypatch.setattr(RadarScope, "draw_grid", boom)
        assert not scope.frame()
        assert scope.running
        monkeypatch.undo()
        assert scope.frame()

    def test_zero_sized_surface(self, clock):
        sc = RadarScope(pygame.Surface((0, 0)), clock=clock)
        sc.start()
        sc.add_detection(90, 100)
        sc.frame()
        assert sc.running


class TestConfiguration:
    def test_setters_apply_immediately(self, scope, clock):
        scope.set_max_range(200)
        assert not scope.add_detection(10, 300)
        scope.add_detection(10, 150)
        clock.t = 600
        scope.set_fade_time(1000)
        [(_, alpha)] = scope.buffer.snapshot(600)
        assert alpha == pytest.approx(0.4)

    def test_bad_values_keep_previous_config(self, scope):
        with pytest.raises(ConfigError):
            scope.set_fade_time(0)
        with pytest.raises(ConfigError):
            scope.set_max_range(-50)
        assert (scope.max_range, scope.fade_time) == (400, 3000)

    def test_resize_recomputes_geometry(self, scope):
        before = scope.geom
        scope.resize(pygame.Surface((1200, 800)))
        assert scope.geom.radius > before.radius
        scope.add_detection(90, 400)
        assert scope.frame()
