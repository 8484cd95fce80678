from src.pickpath.models.domain import Location, Point
from src.pickpath.services.routing.cost import CostModel, route_distance
from src.pickpath.services.routing.models import CostWeights
from src.pickpath.services.routing.or_opt import OrOptImprover, candidate_moves, relocate_segment


def _loc(code: str, x: int, y: int, zone: str = "Z1", aisle: str = "A01") -> Location:
    return Location(location_code=code, point=Point(x, y), zone=zone, aisle=aisle, bay="B01", level="L1")


def _codes(route) -> list[str]:
    return [loc.location_code for loc in route]


def test_relocate_segment_moves_forward_and_backward():
    route = [_loc(code, i, 0) for i, code in enumerate("abcdef")]

    assert _codes(relocate_segment(route, 1, 2, 4)) == list("adbcef")
    assert _codes(relocate_segment(route, 3, 1, 1)) == list("adbcef")
    assert _codes(relocate_segment(route, 1, 1, 5)) == list("acdebf")


def test_candidate_moves_keep_endpoints_fixed():
    for size in (1, 2, 3):
        for start, target in candidate_moves(7, size):
            assert start >= 1
            assert start + size <= 6
            assert 1 <= target <= 6
            assert not start <= target <= start + size


def test_or_opt_sorts_collinear_stops_between_fixed_ends():
    route = [_loc("S", 0, 0), _loc("X", 8, 0), _loc("Y", 2, 0), _loc("Z", 5, 0), _loc("E", 10, 0)]
    assert route_distance(route) == 22.0

    improved = OrOptImprover().improve(route)

    assert _codes(improved) == ["S", "Y", "Z", "X", "E"]
    assert route_distance(improved) == 10.0


def test_or_opt_result_admits_no_improving_relocation():
    coords = [(0, 0), (30, 20), (5, 5), (25, 0), (10, 30), (20, 10), (0, 20), (35, 35), (15, 15), (40, 0)]
    route = [
        _loc(f"L{i}", x, y, zone="Z1" if y < 20 else "Z2", aisle=f"A0{1 + x // 15}")
        for i, (x, y) in enumerate(coords)
    ]
    weights = CostWeights(aisle_crossing_penalty=4.0)
    model = CostModel()

    improved = OrOptImprover().improve(route, weights)
    improved_cost = model.route_cost(improved, weights)

    assert improved_cost <= model.route_cost(route, weights)
    assert improved[0] == route[0] and improved[-1] == route[-1]
    assert sorted(_codes(improved)) == sorted(_codes(route))
    for size in (1, 2, 3):
        for start, target in candidate_moves(len(improved), size):
            moved = relocate_segment(improved, start, size, target)
            assert model.route_cost(moved, weights) >= improved_cost


def test_or_opt_short_routes_unchanged():
    route = [_loc("S", 0, 0), _loc("A", 9, 0), _loc("B", 1, 0)]
    assert OrOptImprover().improve(route) == route


def test_or_opt_is_deterministic():
    route = [_loc(f"L{i}", (i * 37) % 50, (i * 11) % 40) for i in range(9)]

    assert OrOptImprover().improve(route) == OrOptImprover().improve(route)
