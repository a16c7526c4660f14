"""
sweepscope.config
=================

Tiny helper that loads / saves *sweepscope_config.json* and injects
sensible defaults for any missing or unusable keys.
"""

from __future__ import annotations
import json
import logging
import math
from pathlib import Path

from sweepscope.constants import CFG_PATH, FADE_TIME_MS, MAX_RANGE_CM

log = logging.getLogger(__name__)

INPUT_MODES = ("sim", "serial", "mqtt")

_DEFAULT = {
    # display
    "max_range": MAX_RANGE_CM,        # cm, outer ring
    "fade_time": FADE_TIME_MS,        # ms a detection stays visible
    "fps": 60,
    "window": [900, 650],

    # input selection
    "input_mode": "sim",              # "sim", "serial" or "mqtt"
    "serial_port": "/dev/ttyACM0",
    "serial_baud": 9600,

    # MQTT (only used when input_mode == "mqtt")
    "broker": "127.0.0.1",
    "port": 1883,
    "topic": "sweepscope/samples",

    # simulator
    "scan_speed": 50,                 # ms per step
    "angle_step": 1,                  # degrees per step
}

_POSITIVE = ("max_range", "fade_time", "fps", "serial_baud", "port",
             "scan_speed", "angle_step")
_INTEGRAL = ("serial_baud", "port", "angle_step")


class ConfigError(ValueError):
    """Raised when a setting is rejected; the previous value stays active."""


def validate(cfg: dict) -> dict:
    """Replace unusable numbers (non-positive, non-finite, fractional counts) by defaults."""
    for key in _POSITIVE:
        val = cfg.get(key)
        if (isinstance(val, bool) or not isinstance(val, (int, float))
                or not math.isfinite(val) or val <= 0):
            log.warning("config: %s=%r is not a positive number, using %r",
                        key, val, _DEFAULT[key])
            cfg[key] = _DEFAULT[key]
        elif key in _INTEGRAL and val != int(val):
            log.warning("config: %s=%r is not a whole number, using %r",
                        key, val, _DEFAULT[key])
            cfg[key] = _DEFAULT[key]

    if cfg.get("input_mode") not in INPUT_MODES:
        log.warning("config: unknown input_mode %r, using 'sim'", cfg.get("input_mode"))
        cfg["input_mode"] = "sim"

    win = cfg.get("window")
    if (not isinstance(win, (list, tuple)) or len(win) != 2
            or not all(isinstance(v, int) and v > 0 for v in win)):
        cfg["window"] = list(_DEFAULT["window"])
    return cfg


def defaults() -> dict:
    return {**_DEFAULT, "window": list(_DEFAULT["window"])}


def load(path: Path = CFG_PATH) -> dict:
    try:
        with open(path) as fh:
            return validate({**defaults(), **json.load(fh)})
    except FileNotFoundError:
        save(_DEFAULT, path)
        return defaults()
    except json.JSONDecodeError as exc:
        log.warning("config: %s is not valid JSON (%s), using defaults", path, exc)
        return defaults()


def save(cfg: dict, path: Path = CFG_PATH) -> None:
    Path(path).write_text(json.dumps(cfg, indent=2))
