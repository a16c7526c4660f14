"""
Polar → screen mapping for the forward-facing half-disc.

Angles are sensor degrees: 0° is the left horizon, 90° straight ahead
(up on screen), 180° the right horizon.  The sensor angle is turned into a
bearing `(angle - 90)°` measured clockwise from screen-up, the same way
the sensor heading is drawn elsewhere in the GUI (x grows with sin, y
shrinks with cos because pygame's y axis points down).
"""
from __future__ import annotations

import math
from typing import NamedTuple, Tuple

from sweepscope.constants import LABEL_MARGIN


class DisplayGeometry(NamedTuple):
    center_x: float
    center_y: float
    radius: float


def project(angle: float, distance: float, max_range: float,
            geom: DisplayGeometry) -> Tuple[float, float]:
    """Return the screen (x, y) of a sample; distance is clamped to max_range."""
    ratio = min(distance, max_range) / max_range
    r = geom.radius * ratio
    th = math.radians(angle - 90)
    return geom.center_x + r * math.sin(th), geom.center_y - r * math.cos(th)


def geometry_for_size(size: Tuple[int, int], top: int = 0,
                      bottom: int = 0) -> DisplayGeometry:
    """
    Fit the half-disc into a `size` surface minus `top`/`bottom` paddings.

    The origin sits half a `LABEL_MARGIN` above the bottom pad so
    that the angle labels at 0° / 180° stay on screen.
    """
    w, h = size
    usable_h = h - top - bottom
    radius = max(0.0, min(w / 2, usable_h - LABEL_MARGIN / 2) - LABEL_MARGIN)
    return DisplayGeometry(w / 2, h - bottom - LABEL_MARGIN / 2, radius)
