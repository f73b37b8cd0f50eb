import math
from itertools import permutations

import pytest

from src.parcel_router.data.catalog_repository import DEFAULT_POSTAL_REGISTER
from src.parcel_router.errors import EngineStateError
from src.parcel_router.models.domain import Catalog, Job, Waypoint
from src.parcel_router.services.geospatial import distance_between
from src.parcel_router.services.routing.solver import (
    BestRouteTracker,
    TrackerState,
    leg_distances,
    optimize_route,
    permute,
    total_distance,
)


@pytest.fixture
def register() -> Catalog:
    return Catalog.from_rows(DEFAULT_POSTAL_REGISTER)


@pytest.fixture
def small_register() -> Catalog:
    return Catalog.from_rows([(0, 0, "Depot"), (9, 8, "location 1"), (6, 8, "location 2"), (7, 8, "location 3")])


@pytest.fixture
def line_register() -> Catalog:
    # collinear points keep every distance an exact integer
    return Catalog.from_rows([(0, 0, "Depot"), (1, 0, "A"), (2, 0, "B"), (3, 0, "C"), (4, 0, "D")])


class RecordingSink:
    def __init__(self) -> None:
        self.seen: list[tuple[int, ...]] = []

    def update(self, candidate: Job) -> None:
        self.seen.append(tuple(candidate.order))


def _brute_force_minimum(job: Job) -> float:
    depot = job.catalog.depot
    best = math.inf
    for perm in permutations(job.interior):
        points = [depot, *(job.catalog[code] for code in perm), depot]
        cost = sum(math.dist((a.x, a.y), (b.x, b.y)) for a, b in zip(points, points[1:]))
        best = min(best, cost)
    return best


def test_distance_is_symmetric_and_zero_on_self(register: Catalog):
    for a in register:
        assert distance_between(a, a) == 0
        for b in register:
            assert distance_between(a, b) == distance_between(b, a)
            assert distance_between(a, b) >= 0


def test_distance_matches_pythagoras():
    a = Waypoint(id=0, x=0, y=0, name="origin")
    b = Waypoint(id=1, x=3, y=4, name="corner")
    assert distance_between(a, b) == 5.0


def test_total_distance_is_sum_of_legs(register: Catalog):
    job = Job.from_postal_codes(register, [5, 1, 8, 10])
    legs = leg_distances(job)

    assert len(legs) == job.size + 1
    assert total_distance(job) == pytest.approx(sum(legs))
    expected = sum(distance_between(register[a], register[b]) for a, b in zip(job.order, job.order[1:]))
    assert total_distance(job) == pytest.approx(expected)


def test_changing_one_stop_changes_cost_by_adjacent_edges(register: Catalog):
    job = Job.from_postal_codes(register, [1, 2, 3])
    before = total_distance(job)

    changed = job.copy()
    changed.order[2] = 5
    delta = (
        distance_between(register[1], register[5])
        + distance_between(register[5], register[3])
        - distance_between(register[1], register[2])
        - distance_between(register[2], register[3])
    )

    assert total_distance(changed) == pytest.approx(before + delta)


def test_total_distance_is_order_sensitive(register: Catalog):
    a = Job.from_postal_codes(register, [1, 5, 4])
    b = Job.from_postal_codes(register, [5, 1, 4])
    assert total_distance(a) != pytest.approx(total_distance(b))


@pytest.mark.parametrize("size", [1, 2, 3, 4, 5, 6])
def test_permute_visits_every_ordering_once(register: Catalog, size: int):
    job = Job.from_postal_codes(register, list(range(1, size + 1)))
    buffer = job.copy()
    sink = RecordingSink()

    permute(buffer, 1, size, sink)

    assert len(sink.seen) == math.factorial(size)
    assert len(set(sink.seen)) == math.factorial(size)
    for order in sink.seen:
        assert order[0] == 0 and order[-1] == 0
        assert sorted(order[1:-1]) == sorted(job.interior)
    # the buffer is restored after the last backtrack
    assert buffer.order == job.order


def test_permute_with_empty_range_yields_identity(register: Catalog):
    job = Job(catalog=register, size=0, order=[0, 0])
    sink = RecordingSink()

    permute(job, 1, 0, sink)

    assert sink.seen == [(0, 0)]


def test_optimizer_reports_every_permutation(register: Catalog):
    job = Job.from_postal_codes(register, [4, 9, 2, 7, 5])

    stats = optimize_route(job)

    assert stats.permutations_evaluated == math.factorial(5)
    assert stats.best_distance == pytest.approx(total_distance(job))
    assert stats.best_distance <= stats.initial_distance


@pytest.mark.parametrize(
    "codes",
    [
        [3, 1, 2],
        [5, 1, 8, 10],
        [10, 4, 7, 1, 6],
        [2, 9, 5, 8, 3, 10],
    ],
)
def test_optimizer_matches_brute_force(register: Catalog, codes: list[int]):
    job = Job.from_postal_codes(register, codes)
    expected = _brute_force_minimum(job)

    optimize_route(job)

    assert total_distance(job) == pytest.approx(expected)
    assert job.order[0] == 0 and job.order[-1] == 0
    assert sorted(job.interior) == sorted(codes)
    for perm in permutations(codes):
        assert total_distance(job) <= total_distance(Job.from_postal_codes(register, list(perm))) + 1e-9


def test_three_stop_scenario(small_register: Catalog):
    job = Job.from_postal_codes(small_register, [1, 2, 3])
    candidates = [total_distance(Job.from_postal_codes(small_register, list(p))) for p in permutations([1, 2, 3])]

    stats = optimize_route(job)

    assert stats.permutations_evaluated == 6
    assert total_distance(job) == pytest.approx(min(candidates))
    assert total_distance(job) == pytest.approx(10 + 1 + 2 + math.sqrt(145))
    assert job.order in ([0, 1, 3, 2, 0], [0, 2, 3, 1, 0])


def test_single_stop_is_returned_unchanged(register: Catalog):
    job = Job.from_postal_codes(register, [7])

    stats = optimize_route(job)

    assert job.order == [0, 7, 0]
    assert stats.permutations_evaluated == 1
    assert total_distance(job) == pytest.approx(distance_between(register[0], register[7]) * 2)


def test_empty_job_is_a_no_op(register: Catalog):
    job = Job(catalog=register, size=0, order=[0, 0])

    stats = optimize_route(job)

    assert job.order == [0, 0]
    assert stats.permutations_evaluated == 1
    assert stats.improvements == 0
    assert total_distance(job) == 0


def test_already_optimal_order_is_left_alone(line_register: Catalog):
    job = Job.from_postal_codes(line_register, [1, 2, 3, 4])
    before = total_distance(job)

    stats = optimize_route(job)

    assert job.order == [0, 1, 2, 3, 4, 0]
    assert total_distance(job) == before == 8
    assert stats.improvements == 0


def test_scrambled_line_is_straightened(line_register: Catalog):
    job = Job.from_postal_codes(line_register, [3, 1, 4, 2])

    sink = RecordingSink()
    permute(job.copy(), 1, job.size, sink)
    first_minimal = next(
        order for order in sink.seen if total_distance(Job(catalog=line_register, size=4, order=list(order))) == 8
    )

    optimize_route(job)

    # several tours cost 8 here; the first one enumerated is kept
    assert total_distance(job) == 8
    assert job.order == list(first_minimal)


def test_ties_keep_the_first_order_seen():
    catalog = Catalog.from_rows([(0, 0, "Depot"), (3, 4, "A"), (6, 0, "B")])
    job = Job.from_postal_codes(catalog, [2, 1])

    stats = optimize_route(job)

    # both directions cost 16; the input order is the baseline and wins
    assert total_distance(job) == 16
    assert job.order == [0, 2, 1, 0]
    assert stats.improvements == 0


def test_optimizer_is_idempotent(register: Catalog):
    first = Job.from_postal_codes(register, [6, 3, 10, 5, 1])
    second = first.copy()

    optimize_route(first)
    optimize_route(second)
    again = first.copy()
    optimize_route(again)

    assert total_distance(first) == pytest.approx(total_distance(second))
    assert total_distance(again) == pytest.approx(total_distance(first))


def test_independent_runs_do_not_share_state(register: Catalog):
    long_job = Job.from_postal_codes(register, [5, 4, 10, 7])
    short_job = Job.from_postal_codes(register, [8])

    optimize_route(long_job)
    stats = optimize_route(short_job)

    # a leaked best distance from the first run would be far below this job's cost
    assert stats.initial_distance == pytest.approx(total_distance(short_job))
    assert short_job.order == [0, 8, 0]


def test_tracker_copies_winning_order_by_value(small_register: Catalog):
    target = Job.from_postal_codes(small_register, [1, 2, 3])
    tracker = BestRouteTracker()
    tracker.configure(target)

    candidate = Job.from_postal_codes(small_register, [1, 3, 2])
    tracker.update(candidate)
    candidate.order[1], candidate.order[2] = candidate.order[2], candidate.order[1]

    assert target.order == [0, 1, 3, 2, 0]
    assert target.order is not candidate.order
    assert tracker.improvements == 1
    assert tracker.evaluated == 1


def test_tracker_ignores_worse_candidates(small_register: Catalog):
    target = Job.from_postal_codes(small_register, [1, 3, 2])
    tracker = BestRouteTracker()
    tracker.configure(target)
    baseline = tracker.best_distance

    tracker.update(Job.from_postal_codes(small_register, [1, 2, 3]))

    assert target.order == [0, 1, 3, 2, 0]
    assert tracker.best_distance == baseline


def test_tracker_update_before_configure_fails(small_register: Catalog):
    tracker = BestRouteTracker()
    assert tracker.state is TrackerState.CONFIGURING

    with pytest.raises(EngineStateError):
        tracker.update(Job.from_postal_codes(small_register, [1, 2]))


def test_tracker_rejects_missing_target():
    with pytest.raises(EngineStateError):
        BestRouteTracker().configure(None)


def test_tracker_rejects_mismatched_candidate(small_register: Catalog):
    tracker = BestRouteTracker()
    tracker.configure(Job.from_postal_codes(small_register, [1, 2, 3]))
    assert tracker.state is TrackerState.UPDATING

    with pytest.raises(EngineStateError):
        tracker.update(Job.from_postal_codes(small_register, [1, 2]))


def test_tracker_reconfigure_resets_baseline(small_register: Catalog):
    tracker = BestRouteTracker()
    tracker.configure(Job.from_postal_codes(small_register, [1, 3, 2]))
    tracker.update(Job.from_postal_codes(small_register, [2, 3, 1]))

    second = Job.from_postal_codes(small_register, [3])
    tracker.configure(second)

    assert tracker.best_distance == pytest.approx(total_distance(second))
    assert tracker.evaluated == 0


@pytest.mark.parametrize(
    "order",
    [
        [0, 1, 2, 0],
        [0, 1, 2, 3],
        [1, 2, 3, 0, 0],
    ],
)
def test_optimizer_rejects_malformed_jobs(small_register: Catalog, order: list[int]):
    job = Job(catalog=small_register, size=3, order=order)

    with pytest.raises(EngineStateError):
        optimize_route(job)
