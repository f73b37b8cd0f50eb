"""Serializers for routing outputs."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from ...models.domain import Job
from ..routing.models import RoutePlan, RouteStop
from ..routing.solver import OptimizationStats, leg_distances

ROUTE_SEPARATOR = " -> "


def format_route(job: Job) -> str:
    return ROUTE_SEPARATOR.join(waypoint.name for waypoint in job.waypoints())


def build_route_plan(job: Job, stats: OptimizationStats) -> RoutePlan:
    legs = leg_distances(job)
    stops = [
        RouteStop(
            sequence=sequence,
            postal_code=waypoint.id,
            name=waypoint.name,
            x=waypoint.x,
            y=waypoint.y,
            distance_from_prev=legs[sequence - 1] if sequence else 0.0,
        )
        for sequence, waypoint in enumerate(job.waypoints())
    ]
    return RoutePlan(
        order=list(job.order),
        stops=stops,
        total_distance=sum(legs),
        route_text=format_route(job),
        permutations_evaluated=stats.permutations_evaluated,
        improvements=stats.improvements,
        initial_distance=stats.initial_distance,
    )


def route_plan_to_json(plan: RoutePlan) -> dict:
    return {
        "order": list(plan.order),
        "total_distance": plan.total_distance,
        "route": plan.route_text,
        "permutations_evaluated": plan.permutations_evaluated,
        "improvements": plan.improvements,
        "initial_distance": plan.initial_distance,
        "stops": [asdict(stop) for stop in plan.stops],
    }


def route_plan_to_csv(plan: RoutePlan) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "postal_code",
        "name",
        "x",
        "y",
        "distance_from_prev",
        "total_distance",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for stop in plan.stops:
        writer.writerow({**asdict(stop), "total_distance": plan.total_distance})
    return buffer.getvalue()
