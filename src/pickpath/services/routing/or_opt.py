"""Or-opt local search: relocate short segments of consecutive stops."""

from __future__ import annotations

from typing import Iterator, Sequence

from ...models.domain import Location
from .cost import CostModel
from .models import CostWeights, Route, RouteConstraints

MAX_SEGMENT_SIZE = 3


def relocate_segment(route: Sequence[Location], start: int, size: int, target: int) -> Route:
    """Move ``route[start:start + size]`` so it is inserted before original index ``target``."""
    segment = list(route[start : start + size])
    relocated: Route = []
    for index, location in enumerate(route):
        if index == target:
            relocated.extend(segment)
        if index < start or index >= start + size:
            relocated.append(location)
    if target >= len(route):
        relocated.extend(segment)
    return relocated


def candidate_moves(route_length: int, size: int) -> Iterator[tuple[int, int]]:
    """Yield ``(start, target)`` pairs that actually move a segment of ``size``; both ends stay fixed."""
    for start in range(1, route_length - size):
        for target in range(1, route_length):
            if start <= target <= start + size:
                continue
            yield start, target


class OrOptImprover:
    """First-improvement Or-opt with segment sizes 1 to 3, smallest first."""

    def __init__(self, cost_model: CostModel | None = None) -> None:
        self.cost_model = cost_model or CostModel()

    def _try_relocate(
        self,
        route: Route,
        size: int,
        weights: CostWeights | None,
        constraints: RouteConstraints | None,
    ) -> Route | None:
        current_cost = self.cost_model.route_cost(route, weights, constraints)
        for start, target in candidate_moves(len(route), size):
            candidate = relocate_segment(route, start, size, target)
            if self.cost_model.route_cost(candidate, weights, constraints) < current_cost:
                return candidate
        return None

    def improve(
        self,
        route: Sequence[Location],
        weights: CostWeights | None = None,
        constraints: RouteConstraints | None = None,
    ) -> Route:
        improved = list(route)
        if len(improved) < 4:
            return improved

        found = True
        while found:
            found = False
            for size in range(1, min(MAX_SEGMENT_SIZE, len(improved) - 2) + 1):
                candidate = self._try_relocate(improved, size, weights, constraints)
                if candidate is not None:
                    improved = candidate
                    found = True
                    break
        return improved
