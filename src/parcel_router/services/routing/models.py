"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(slots=True)
class RouteStop:
    sequence: int
    postal_code: int
    name: str
    x: int
    y: int
    distance_from_prev: float


@dataclass(slots=True)
class RoutePlan:
    order: List[int]
    stops: List[RouteStop]
    total_distance: float
    route_text: str
    permutations_evaluated: int
    improvements: int
    initial_distance: float
