"""Routing orchestration service."""

from __future__ import annotations

import logging
from dataclasses import asdict

from ...config import settings
from ...data.catalog_repository import get_catalog
from ...persistence.filesystem import FileStorage
from ...schemas.routing import RouteStopModel, RoutingRequest, RoutingResponse
from ..jobs.builder import JobRequestBuilder
from ..outputs.routing_formatter import build_route_plan, route_plan_to_csv, route_plan_to_json
from .models import RoutePlan
from .solver import optimize_route

logger = logging.getLogger(__name__)


def plan_route(postal_codes: list[int], builder: JobRequestBuilder) -> RoutePlan:
    """Validate the postal codes, optimize the job and describe the resulting route."""
    job = builder.build(postal_codes)
    stats = optimize_route(job)
    return build_route_plan(job, stats)


def optimize_routes(payload: RoutingRequest) -> RoutingResponse:
    builder = JobRequestBuilder(get_catalog())
    logger.info("Optimizing delivery job for postal codes %s", payload.postal_codes)
    plan = plan_route(payload.postal_codes, builder)

    metadata: dict = {
        "status": "optimal",
        "size": len(plan.order) - 2,
        "permutations_evaluated": plan.permutations_evaluated,
        "improvements": plan.improvements,
        "initial_distance": plan.initial_distance,
    }
    if payload.run_label:
        metadata["run_label"] = payload.run_label
    if payload.requested_by:
        metadata["author"] = payload.requested_by

    persist = payload.persist if payload.persist is not None else settings.persist_outputs
    if persist:
        storage = FileStorage()
        run_dir = storage.make_run_directory(prefix="route")
        storage.write_json(run_dir / "summary.json", {**route_plan_to_json(plan), "metadata": metadata})
        storage.write_csv(run_dir / "stops.csv", route_plan_to_csv(plan))
        metadata["output_dir"] = str(run_dir)
        logger.info("Persisted route run to %s", run_dir)

    return RoutingResponse(
        order=plan.order,
        total_distance=plan.total_distance,
        route=plan.route_text,
        stops=[RouteStopModel(**asdict(stop)) for stop in plan.stops],
        metadata=metadata,
    )
