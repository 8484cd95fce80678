"""Travel cost model over warehouse grid locations.

Two distance notions live here and must not be mixed up:

* ``manhattan_distance`` is the raw walking distance, used for everything shown to
  a picker (leg distance, totals, efficiency).
* ``CostModel.cost`` is the weighted cost the optimizers minimize: distance times
  ``distance_weight`` plus aisle, zone and hook penalties.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...models.domain import Location, Point
from .models import CostWeights, RouteConstraints

WALKING_SPEED_UNITS_PER_MINUTE = 3.0
MINUTES_PER_PICK = 0.5


def manhattan_distance(p1: Point, p2: Point) -> float:
    return float(abs(p1.x - p2.x) + abs(p1.y - p2.y))


def is_turn(prev_prev: Location, prev: Location, cur: Location) -> bool:
    dx1, dy1 = prev.x - prev_prev.x, prev.y - prev_prev.y
    dx2, dy2 = cur.x - prev.x, cur.y - prev.y
    return dx1 != dx2 or dy1 != dy2


def turn_penalty(
    prev_prev: Optional[Location],
    prev: Location,
    cur: Optional[Location],
    weights: CostWeights | None = None,
) -> float:
    """Return the turn penalty if the walking direction changes at ``prev``."""
    if prev_prev is None or cur is None:
        return 0.0
    weights = weights or CostWeights()
    return weights.turn_penalty if is_turn(prev_prev, prev, cur) else 0.0


def estimate_time(distance: float, pick_count: int) -> float:
    """Minutes to walk ``distance`` and perform ``pick_count`` picks."""
    return distance / WALKING_SPEED_UNITS_PER_MINUTE + pick_count * MINUTES_PER_PICK


def efficiency_score(actual: float, theoretical_optimal: float) -> float:
    if actual <= 0 or theoretical_optimal <= 0:
        return 0.0
    return min(1.0, theoretical_optimal / actual)


def route_distance(route: Sequence[Location]) -> float:
    return sum(manhattan_distance(a.point, b.point) for a, b in zip(route, route[1:]))


class PenaltyHook(ABC):
    """Extra cost term for moving between two locations.

    Hooks are how layout-aware penalties plug into :class:`CostModel` without
    changing the ``cost`` signature.
    """

    def applies(self, constraints: RouteConstraints) -> bool:
        return True

    @abstractmethod
    def penalty(
        self,
        origin: Location,
        destination: Location,
        weights: CostWeights,
        constraints: RouteConstraints,
    ) -> float:
        raise NotImplementedError


class BlockedZonePenalty(PenaltyHook):
    """Penalty for walking through blocked areas.

    Blocked-area polygons are not part of the layout data yet, so no leg is
    considered blocked. ``weights.blocked_zone_penalty`` is the per-leg amount
    once they are.
    """

    def applies(self, constraints: RouteConstraints) -> bool:
        return constraints.avoid_blocked_zones

    def penalty(self, origin, destination, weights, constraints) -> float:
        return 0.0


class CapacityPenalty(PenaltyHook):
    """Reserved for ``weights.capacity_violation_penalty``; capacity is enforced by batching."""

    def penalty(self, origin, destination, weights, constraints) -> float:
        return 0.0


class TimeWindowPenalty(PenaltyHook):
    """Reserved for ``constraints.time_windows``."""

    def applies(self, constraints: RouteConstraints) -> bool:
        return bool(constraints.time_windows)

    def penalty(self, origin, destination, weights, constraints) -> float:
        return 0.0


def default_hooks() -> tuple[PenaltyHook, ...]:
    return (BlockedZonePenalty(), CapacityPenalty(), TimeWindowPenalty())


class CostModel:
    """Weighted pairwise travel cost used by every construction and improvement step."""

    def __init__(self, hooks: Sequence[PenaltyHook] | None = None) -> None:
        self.hooks: tuple[PenaltyHook, ...] = tuple(hooks) if hooks is not None else default_hooks()

    def cost(
        self,
        origin: Location,
        destination: Location,
        weights: CostWeights | None = None,
        constraints: RouteConstraints | None = None,
    ) -> float:
        weights = weights or CostWeights()
        constraints = constraints or RouteConstraints()

        total = manhattan_distance(origin.point, destination.point) * weights.distance_weight
        if origin.aisle != destination.aisle:
            total += weights.aisle_crossing_penalty
        # Zone changes reuse the turn penalty coefficient.
        if origin.zone != destination.zone:
            total += weights.turn_penalty
        for hook in self.hooks:
            if hook.applies(constraints):
                total += hook.penalty(origin, destination, weights, constraints)
        return total

    def route_cost(
        self,
        route: Sequence[Location],
        weights: CostWeights | None = None,
        constraints: RouteConstraints | None = None,
    ) -> float:
        return sum(self.cost(a, b, weights, constraints) for a, b in zip(route, route[1:]))
