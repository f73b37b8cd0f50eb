"""Postal register endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings
from ...data.catalog_repository import get_catalog
from ...models.domain import DEPOT_ID
from ...schemas.routing import CatalogResponse, WaypointModel

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("", response_model=CatalogResponse, status_code=status.HTTP_200_OK)
def list_catalog() -> CatalogResponse:
    """Postal register with the job size limits in force."""
    catalog = get_catalog()
    return CatalogResponse(
        depot_id=DEPOT_ID,
        max_postal_code=catalog.max_postal_code,
        max_job_size=settings.max_job_size(catalog),
        waypoints=[
            WaypointModel(postal_code=waypoint.id, name=waypoint.name, x=waypoint.x, y=waypoint.y)
            for waypoint in catalog
        ],
    )
