"""Route group exports."""

from . import catalog, health, routes

__all__ = ["catalog", "health", "routes"]
