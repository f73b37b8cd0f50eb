"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class RoutingRequest(BaseModel):
    postal_codes: List[int] = Field(..., min_length=1, description="Postal codes to deliver to, depot excluded.")
    persist: Optional[bool] = Field(
        default=None,
        description="Write the run to the outputs directory. Defaults to the persist_outputs setting.",
    )
    requested_by: Optional[str] = Field(default=None, description="Person or system requesting the run.")
    run_label: Optional[str] = Field(default=None, description="Friendly name for persisted outputs.")


class RouteStopModel(BaseModel):
    sequence: int
    postal_code: int
    name: str
    x: int
    y: int
    distance_from_prev: float


class RoutingResponse(BaseModel):
    order: List[int]
    total_distance: float
    route: str
    stops: List[RouteStopModel]
    metadata: dict


class WaypointModel(BaseModel):
    postal_code: int
    name: str
    x: int
    y: int


class CatalogResponse(BaseModel):
    depot_id: int
    max_postal_code: int
    max_job_size: int
    waypoints: List[WaypointModel]
