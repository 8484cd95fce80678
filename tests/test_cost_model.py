import pytest

from src.pickpath.models.domain import Location, Point
from src.pickpath.services.routing.cost import (
    BlockedZonePenalty,
    CostModel,
    PenaltyHook,
    efficiency_score,
    estimate_time,
    manhattan_distance,
    route_distance,
    turn_penalty,
)
from src.pickpath.services.routing.models import CostWeights, RouteConstraints


def _loc(code: str, x: int, y: int, zone: str = "Z1", aisle: str = "A01") -> Location:
    return Location(location_code=code, point=Point(x, y), zone=zone, aisle=aisle, bay="B01", level="L1")


class FlatBlockedPenalty(BlockedZonePenalty):
    def penalty(self, origin, destination, weights, constraints) -> float:
        return weights.blocked_zone_penalty


def test_manhattan_distance_is_sum_of_axis_differences():
    assert manhattan_distance(Point(0, 0), Point(3, -4)) == 7.0
    assert manhattan_distance(Point(5, 5), Point(5, 5)) == 0.0


def test_cost_is_weighted_distance_within_same_aisle_and_zone():
    model = CostModel()
    assert model.cost(_loc("A", 0, 0), _loc("B", 3, 4)) == 7.0
    assert model.cost(_loc("A", 0, 0), _loc("B", 3, 4), CostWeights(distance_weight=2.0)) == 14.0


def test_cost_adds_aisle_and_zone_penalties():
    model = CostModel()
    origin = _loc("A", 0, 0)
    assert model.cost(origin, _loc("B", 3, 4, aisle="A02")) == 12.0
    assert model.cost(origin, _loc("C", 3, 4, zone="Z2")) == 9.0
    assert model.cost(origin, _loc("D", 3, 4, zone="Z2", aisle="A02")) == 14.0

    weights = CostWeights(aisle_crossing_penalty=10.0, turn_penalty=3.0)
    assert model.cost(origin, _loc("D", 3, 4, zone="Z2", aisle="A02"), weights) == 20.0


def test_cost_is_never_negative():
    model = CostModel()
    weights = CostWeights(distance_weight=0.0, aisle_crossing_penalty=0.0, turn_penalty=0.0)
    assert model.cost(_loc("A", 0, 0), _loc("B", 9, 9, aisle="A03"), weights) == 0.0


def test_blocked_zone_hook_only_applies_when_avoiding_blocked_zones():
    model = CostModel(hooks=[FlatBlockedPenalty()])
    origin, destination = _loc("A", 0, 0), _loc("B", 1, 0)

    assert model.cost(origin, destination, CostWeights(), RouteConstraints(avoid_blocked_zones=True)) == 101.0
    assert model.cost(origin, destination, CostWeights(), RouteConstraints(avoid_blocked_zones=False)) == 1.0


def test_default_hooks_contribute_nothing():
    model = CostModel()
    constraints = RouteConstraints(avoid_blocked_zones=True, max_capacity=1)
    assert model.cost(_loc("A", 0, 0), _loc("B", 2, 0), None, constraints) == 2.0


def test_custom_hook_is_added_to_cost():
    class Surcharge(PenaltyHook):
        def penalty(self, origin, destination, weights, constraints) -> float:
            return 3.0

    model = CostModel(hooks=[Surcharge()])
    assert model.cost(_loc("A", 0, 0), _loc("B", 2, 0)) == 5.0


def test_route_cost_and_route_distance_differ_when_penalties_apply():
    model = CostModel()
    route = [_loc("S", 0, 0), _loc("A", 5, 0), _loc("B", 5, 5, aisle="A02")]

    assert route_distance(route) == 10.0
    assert model.route_cost(route) == 15.0


def test_turn_penalty_detects_direction_change():
    a, b = _loc("A", 0, 0), _loc("B", 1, 0)
    assert turn_penalty(a, b, _loc("C", 2, 0)) == 0.0
    assert turn_penalty(a, b, _loc("C", 1, 1)) == 2.0
    assert turn_penalty(a, b, _loc("C", 1, 1), CostWeights(turn_penalty=4.5)) == 4.5
    assert turn_penalty(None, b, _loc("C", 1, 1)) == 0.0
    assert turn_penalty(a, b, None) == 0.0


def test_estimate_time_combines_walking_and_picking():
    assert estimate_time(30.0, 2) == pytest.approx(11.0)
    assert estimate_time(0.0, 1) == pytest.approx(0.5)
    assert estimate_time(9.0, 0) == pytest.approx(3.0)


def test_efficiency_score_bounds():
    assert efficiency_score(10.0, 8.0) == pytest.approx(0.8)
    assert efficiency_score(5.0, 10.0) == 1.0
    assert efficiency_score(0.0, 5.0) == 0.0
    assert efficiency_score(5.0, 0.0) == 0.0


def test_point_rejects_non_integer_coordinates():
    with pytest.raises(ValueError):
        Point(1.5, 2)
    with pytest.raises(ValueError):
        Point("3", 2)


def test_cost_weights_reject_negative_values():
    with pytest.raises(ValueError):
        CostWeights(distance_weight=-1.0)
