"""2-opt local search over the weighted warehouse cost."""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from ...models.domain import Location
from .cost import CostModel
from .models import CostWeights, Route, RouteConstraints

IMPROVEMENT_EPSILON = 1e-9
DEFAULT_MAX_PASSES = 1000


class TwoOptImprover:
    """Reverse interior segments while doing so lowers the route cost.

    The first and last positions are never moved; only edges between them are
    re-wired.
    """

    def __init__(self, cost_model: CostModel | None = None, max_passes: int = DEFAULT_MAX_PASSES) -> None:
        self.cost_model = cost_model or CostModel()
        self.max_passes = max_passes

    def swap_delta(
        self,
        route: Sequence[Location],
        i: int,
        k: int,
        weights: CostWeights | None = None,
        constraints: RouteConstraints | None = None,
    ) -> float:
        """Cost change from reversing ``route[i:k + 1]``."""
        cost = self.cost_model.cost
        a, b, c, d = route[i - 1], route[i], route[k], route[k + 1]
        return (cost(a, c, weights, constraints) + cost(b, d, weights, constraints)) - (
            cost(a, b, weights, constraints) + cost(c, d, weights, constraints)
        )

    def improve(
        self,
        route: Sequence[Location],
        weights: CostWeights | None = None,
        constraints: RouteConstraints | None = None,
    ) -> Route:
        improved = list(route)
        if len(improved) < 4:
            return improved

        size = len(improved)
        passes = 0
        changed = True
        while changed and passes < self.max_passes:
            changed = False
            passes += 1
            for i in range(1, size - 2):
                for k in range(i + 1, size - 1):
                    if self.swap_delta(improved, i, k, weights, constraints) < -IMPROVEMENT_EPSILON:
                        improved[i : k + 1] = reversed(improved[i : k + 1])
                        changed = True

        if changed:
            logging.warning(f"2-opt stopped at the pass limit ({self.max_passes}) before converging")
        return improved

    def optimize_with_restarts(
        self,
        route: Sequence[Location],
        weights: CostWeights | None = None,
        constraints: RouteConstraints | None = None,
        restarts: int = 5,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> Route:
        """Run 2-opt from the given order and from ``restarts`` shuffled orders, keeping the cheapest.

        Shuffling uses ``rng`` (or a fresh ``random.Random(seed)``) and never the
        module-level random state. The first and last stops stay in place.
        """
        rng = rng or random.Random(seed)
        best = self.improve(route, weights, constraints)
        best_cost = self.cost_model.route_cost(best, weights, constraints)

        for _ in range(restarts):
            shuffled = list(route)
            if len(shuffled) > 2:
                middle = shuffled[1:-1]
                rng.shuffle(middle)
                shuffled[1:-1] = middle
            candidate = self.improve(shuffled, weights, constraints)
            candidate_cost = self.cost_model.route_cost(candidate, weights, constraints)
            if candidate_cost < best_cost:
                best, best_cost = candidate, candidate_cost
        return best
