"""
sweepscope package
==================

Sweep-radar display for a servo-mounted rangefinder (or its simulator).
"""

__all__ = [
    "constants",
    "config",
    "buffer",
    "projection",
    "sources",
    "serial_reader",
    "mqtt_client",
    "simulator",
    "scope",
    "gui",
]

__version__ = "1.0"
