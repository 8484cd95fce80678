"""Nearest-neighbor route construction."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ...models.domain import Location
from .cost import CostModel
from .models import CostWeights, Route, RouteConstraints

AccessibilityCheck = Callable[[Location, RouteConstraints], bool]


def always_accessible(location: Location, constraints: RouteConstraints) -> bool:
    return True


def is_distinct_end(start: Location, end: Optional[Location]) -> bool:
    """True when ``end`` should be appended as its own stop after the picks."""
    if end is None:
        return False
    return end.location_code != start.location_code or end.point != start.point


class NearestNeighborConstructor:
    def __init__(
        self,
        cost_model: CostModel | None = None,
        is_accessible: AccessibilityCheck = always_accessible,
    ) -> None:
        self.cost_model = cost_model or CostModel()
        self.is_accessible = is_accessible

    def _nearest(
        self,
        current: Location,
        unvisited: dict[int, Location],
        weights: CostWeights,
        constraints: RouteConstraints,
    ) -> int:
        best_key: Optional[int] = None
        best_cost = float("inf")
        for key, candidate in unvisited.items():
            if not self.is_accessible(candidate, constraints):
                continue
            candidate_cost = self.cost_model.cost(current, candidate, weights, constraints)
            if candidate_cost < best_cost:
                best_cost = candidate_cost
                best_key = key
        if best_key is None:
            best_key = next(iter(unvisited))
            logging.debug(f"No accessible target from {current.location_code}; falling back to first remaining")
        return best_key

    def construct(
        self,
        start: Location,
        targets: Sequence[Location],
        end: Optional[Location] = None,
        weights: CostWeights | None = None,
        constraints: RouteConstraints | None = None,
    ) -> Route:
        weights = weights or CostWeights()
        constraints = constraints or RouteConstraints()

        # Keyed by input position so duplicate locations are each visited once.
        unvisited = dict(enumerate(targets))
        route: Route = [start]
        current = start
        while unvisited:
            current = unvisited.pop(self._nearest(current, unvisited, weights, constraints))
            route.append(current)

        if is_distinct_end(start, end):
            route.append(end)
        return route

    def construct_capacity_constrained(
        self,
        start: Location,
        targets: Sequence[Location],
        end: Optional[Location] = None,
        weights: CostWeights | None = None,
        constraints: RouteConstraints | None = None,
    ) -> list[Route]:
        """Split targets into sub-routes of at most ``constraints.max_capacity`` picks."""
        weights = weights or CostWeights()
        constraints = constraints or RouteConstraints()
        capacity = constraints.max_capacity or len(targets)

        unvisited = dict(enumerate(targets))
        routes: list[Route] = []
        while unvisited:
            route: Route = [start]
            current = start
            load = 0
            while unvisited and load < capacity:
                current = unvisited.pop(self._nearest(current, unvisited, weights, constraints))
                route.append(current)
                load += 1
            if is_distinct_end(start, end):
                route.append(end)
            routes.append(route)
        return routes
