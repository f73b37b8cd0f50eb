"""Geometry helpers for the postal register grid."""

from __future__ import annotations

import math

from ..models.domain import Waypoint


def distance_between(a: Waypoint, b: Waypoint) -> float:
    """Straight-line (Euclidean) distance between two waypoints."""

    dx = a.x - b.x
    dy = a.y - b.y
    return math.sqrt(dx * dx + dy * dy)
