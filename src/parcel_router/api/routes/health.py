"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...data.catalog_repository import get_catalog

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/catalog", status_code=status.HTTP_200_OK)
def health_catalog() -> dict:
    """Check that the postal register loads."""
    try:
        catalog = get_catalog()
        return {
            "service": "catalog",
            "healthy": True,
            "depot": catalog.depot.name,
            "postal_codes": catalog.max_postal_code,
        }
    except Exception as e:
        return {"service": "catalog", "healthy": False, "error": str(e)}
