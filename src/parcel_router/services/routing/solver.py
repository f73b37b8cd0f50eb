"""Exhaustive route solver.

Every ordering of a job's interior postal codes is generated in place by swapping,
scored, and offered to a ``BestRouteTracker`` that copies the cheapest order back
into the caller's job. The result is optimal, at ``O(size! * size)`` cost, so jobs
are kept small by the request builder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from ...errors import EngineStateError
from ...models.domain import Job
from ..geospatial import distance_between

logger = logging.getLogger(__name__)


def leg_distances(job: Job) -> list[float]:
    """Distance of each consecutive pair of the tour, depot to depot."""
    catalog = job.catalog
    order = job.order
    return [distance_between(catalog[order[i]], catalog[order[i + 1]]) for i in range(job.size + 1)]


def total_distance(job: Job) -> float:
    catalog = job.catalog
    order = job.order
    total = 0.0
    for i in range(job.size + 1):
        total += distance_between(catalog[order[i]], catalog[order[i + 1]])
    return total


class TrackerState(Enum):
    CONFIGURING = "configuring"
    UPDATING = "updating"


class CandidateSink(Protocol):
    def update(self, candidate: Job) -> None: ...


class BestRouteTracker:
    """Keeps the cheapest tour seen during one optimization run.

    ``configure`` records the job that receives the answer and uses its current cost
    as the baseline. Each ``update`` scores a candidate and, on a strict improvement,
    copies the candidate's order into that job. Ties keep the first order seen.
    """

    def __init__(self) -> None:
        self.state = TrackerState.CONFIGURING
        self.target: Job | None = None
        self.best_distance = float("inf")
        self.evaluated = 0
        self.improvements = 0

    def configure(self, job: Job | None) -> None:
        if job is None:
            raise EngineStateError("Best-route tracker needs a target job.")
        job.check_shape()
        self.target = job
        self.best_distance = total_distance(job)
        self.evaluated = 0
        self.improvements = 0
        self.state = TrackerState.UPDATING
        logger.debug("Baseline distance %.4f for order %s", self.best_distance, job.order)

    def update(self, candidate: Job) -> None:
        if self.state is not TrackerState.UPDATING or self.target is None:
            raise EngineStateError("Best-route tracker updated before it was configured.")
        if candidate.size != self.target.size or len(candidate.order) != len(self.target.order):
            raise EngineStateError(
                f"Candidate of size {candidate.size} does not match target of size {self.target.size}."
            )

        distance = total_distance(candidate)
        self.evaluated += 1
        if distance < self.best_distance:
            self.best_distance = distance
            self.target.order[:] = candidate.order
            self.improvements += 1
            logger.debug("Improved distance %.4f with order %s", distance, candidate.order)


def permute(job_buff: Job, l: int, r: int, tracker: CandidateSink) -> None:
    """Offer every ordering of ``job_buff.order[l..r]`` to ``tracker``.

    The buffer is permuted in place and restored after each branch.
    """
    if l >= r:
        tracker.update(job_buff)
        return

    order = job_buff.order
    for i in range(l, r + 1):
        order[l], order[i] = order[i], order[l]
        permute(job_buff, l + 1, r, tracker)
        order[l], order[i] = order[i], order[l]


@dataclass(slots=True)
class OptimizationStats:
    permutations_evaluated: int
    improvements: int
    initial_distance: float
    best_distance: float


def optimize_route(job: Job) -> OptimizationStats:
    """Rewrite ``job.order`` with the shortest depot round trip over its postal codes."""

    job.check_shape()
    job_buff = job.copy()

    tracker = BestRouteTracker()
    tracker.configure(job)
    initial_distance = tracker.best_distance
    permute(job_buff, 1, job_buff.size, tracker)

    stats = OptimizationStats(
        permutations_evaluated=tracker.evaluated,
        improvements=tracker.improvements,
        initial_distance=initial_distance,
        best_distance=tracker.best_distance,
    )
    logger.info(
        "Optimized job of %d postal codes: %d permutations, distance %.4f -> %.4f",
        job.size,
        stats.permutations_evaluated,
        stats.initial_distance,
        stats.best_distance,
    )
    return stats
