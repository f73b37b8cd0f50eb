"""Domain models for the postal register and delivery jobs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

from ..errors import CatalogError, EngineStateError

DEPOT_ID = 0


@dataclass(frozen=True, slots=True)
class Waypoint:
    """A named location of the postal register with integer grid coordinates."""

    id: int
    x: int
    y: int
    name: str


class Catalog:
    """Read-only postal register indexed by waypoint id. Id 0 is the depot."""

    __slots__ = ("_waypoints",)

    def __init__(self, waypoints: Iterable[Waypoint]) -> None:
        items = tuple(waypoints)
        if not items:
            raise CatalogError("Postal register is empty; at least the depot is required.")
        for index, waypoint in enumerate(items):
            if waypoint.id != index:
                raise CatalogError(
                    f"Postal register ids must be contiguous from {DEPOT_ID}: "
                    f"found id {waypoint.id} at position {index}."
                )
        self._waypoints = items

    @classmethod
    def from_rows(cls, rows: Iterable[tuple[int, int, str]]) -> "Catalog":
        return cls(Waypoint(id=index, x=x, y=y, name=name) for index, (x, y, name) in enumerate(rows))

    def __getitem__(self, waypoint_id: int) -> Waypoint:
        return self._waypoints[waypoint_id]

    def __len__(self) -> int:
        return len(self._waypoints)

    def __iter__(self) -> Iterator[Waypoint]:
        return iter(self._waypoints)

    def __repr__(self) -> str:
        return f"Catalog(size={len(self._waypoints)})"

    @property
    def depot(self) -> Waypoint:
        return self._waypoints[DEPOT_ID]

    @property
    def max_postal_code(self) -> int:
        return len(self._waypoints) - 1

    def contains(self, waypoint_id: int) -> bool:
        return 0 <= waypoint_id < len(self._waypoints)


@dataclass(slots=True)
class Job:
    """One delivery request.

    ``order`` is the full tour: the depot, ``size`` interior postal codes, then the depot again.
    The route optimizer rewrites ``order`` in place.
    """

    catalog: Catalog
    size: int
    order: list[int] = field(default_factory=list)

    @classmethod
    def from_postal_codes(cls, catalog: Catalog, postal_codes: Sequence[int]) -> "Job":
        return cls(catalog=catalog, size=len(postal_codes), order=[DEPOT_ID, *postal_codes, DEPOT_ID])

    @property
    def interior(self) -> list[int]:
        return self.order[1 : self.size + 1]

    def copy(self) -> "Job":
        return Job(catalog=self.catalog, size=self.size, order=list(self.order))

    def waypoints(self) -> list[Waypoint]:
        return [self.catalog[waypoint_id] for waypoint_id in self.order]

    def check_shape(self) -> None:
        """Fail fast when the tour does not match ``size`` or is not anchored at the depot."""
        if self.size < 0 or len(self.order) != self.size + 2:
            raise EngineStateError(
                f"Job order has {len(self.order)} entries; expected size + 2 = {self.size + 2}."
            )
        if self.order[0] != DEPOT_ID or self.order[-1] != DEPOT_ID:
            raise EngineStateError(f"Job order must start and end at the depot: {self.order}.")
