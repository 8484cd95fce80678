import logging
import random

from src.pickpath.models.domain import Location, Point
from src.pickpath.services.routing.construction import NearestNeighborConstructor
from src.pickpath.services.routing.cost import CostModel, route_distance
from src.pickpath.services.routing.models import CostWeights
from src.pickpath.services.routing.two_opt import IMPROVEMENT_EPSILON, TwoOptImprover


def _loc(code: str, x: int, y: int, zone: str = "Z1", aisle: str = "A01") -> Location:
    return Location(location_code=code, point=Point(x, y), zone=zone, aisle=aisle, bay="B01", level="L1")


def _scattered_route() -> list[Location]:
    coords = [(0, 0), (40, 10), (5, 30), (25, 25), (35, 0), (10, 10), (30, 40), (15, 5), (45, 35), (20, 15), (0, 40)]
    aisles = ["A01", "A02", "A03"]
    return [
        _loc(f"L{i}", x, y, zone="Z1" if x < 25 else "Z2", aisle=aisles[y // 15])
        for i, (x, y) in enumerate(coords)
    ]


def _assert_two_opt_optimal(improver: TwoOptImprover, route: list[Location], weights=None) -> None:
    for i in range(1, len(route) - 2):
        for k in range(i + 1, len(route) - 1):
            assert improver.swap_delta(route, i, k, weights) >= -IMPROVEMENT_EPSILON


def test_two_opt_uncrosses_collinear_nearest_neighbor_path():
    start = _loc("S", 0, 0)
    targets = [_loc("T1", 1, 0), _loc("T2", -3, 0), _loc("T3", 6, 0)]
    nearest = NearestNeighborConstructor().construct(start, targets)
    assert [loc.location_code for loc in nearest] == ["S", "T1", "T2", "T3"]

    improved = TwoOptImprover().improve(nearest)

    assert [loc.location_code for loc in improved] == ["S", "T2", "T1", "T3"]
    assert route_distance(improved) == 12.0
    assert route_distance(improved) < route_distance(nearest)


def test_two_opt_result_is_locally_optimal():
    improver = TwoOptImprover()
    weights = CostWeights(aisle_crossing_penalty=7.0, turn_penalty=1.5)
    route = _scattered_route()

    improved = improver.improve(route, weights)

    _assert_two_opt_optimal(improver, improved, weights)
    model = CostModel()
    assert model.route_cost(improved, weights) <= model.route_cost(route, weights)


def test_two_opt_keeps_endpoints_and_visits_every_stop():
    route = _scattered_route()

    improved = TwoOptImprover().improve(route)

    assert improved[0] == route[0]
    assert improved[-1] == route[-1]
    assert sorted(loc.location_code for loc in improved) == sorted(loc.location_code for loc in route)


def test_two_opt_does_not_mutate_input():
    route = _scattered_route()
    snapshot = list(route)

    TwoOptImprover().improve(route)

    assert route == snapshot


def test_short_routes_are_returned_unchanged():
    route = [_loc("S", 0, 0), _loc("A", 10, 0), _loc("B", 5, 0)]
    assert TwoOptImprover().improve(route) == route


def test_pass_limit_still_returns_a_permutation():
    route = _scattered_route()

    improved = TwoOptImprover(max_passes=1).improve(route)

    assert len(improved) == len(route)
    assert set(improved) == set(route)


def test_restarts_never_worse_than_single_run():
    improver = TwoOptImprover()
    model = CostModel()
    route = _scattered_route()

    single = improver.improve(route)
    restarted = improver.optimize_with_restarts(route, restarts=5, seed=7)

    assert model.route_cost(restarted) <= model.route_cost(single)
    assert restarted[0] == route[0] and restarted[-1] == route[-1]


def test_restarts_are_reproducible_and_leave_global_random_alone():
    improver = TwoOptImprover()
    route = _scattered_route()
    random.seed(1234)
    state = random.getstate()

    first = improver.optimize_with_restarts(route, restarts=4, rng=random.Random(99))
    second = improver.optimize_with_restarts(route, restarts=4, rng=random.Random(99))

    assert first == second
    assert random.getstate() == state


def test_pass_limit_is_logged(caplog):
    route = [_loc("S", 0, 0), _loc("T1", 1, 0), _loc("T2", -3, 0), _loc("T3", 6, 0)]

    with caplog.at_level(logging.WARNING):
        TwoOptImprover(max_passes=1).improve(route)

    assert any(record.name == "root" and "pass limit" in record.getMessage() for record in caplog.records)
