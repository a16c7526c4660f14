import os

# headless pygame for every test module
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from sweepscope.buffer import DetectionBuffer
from sweepscope.scope import RadarScope


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, t=0.0):
        self.t = t

    def __call__(self):
        return self.t


@pytest.fixture
def buffer():
    return DetectionBuffer(max_range=400, fade_time=3000)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def surface():
    return pygame.Surface((600, 400))


@pytest.fixture
def scope(surface, clock):
    sc = RadarScope(surface, max_range=400, fade_time=3000, clock=clock)
    sc.start()
    return sc
