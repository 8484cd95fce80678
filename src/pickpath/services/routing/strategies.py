"""Named routing strategies and the selector that runs them."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Sequence

from ...models.domain import Location
from .construction import NearestNeighborConstructor
from .cost import CostModel
from .models import CostWeights, Route, RouteConstraints
from .or_opt import OrOptImprover
from .two_opt import DEFAULT_MAX_PASSES, TwoOptImprover

NEAREST_NEIGHBOR = "nearest_neighbor"
ENHANCED_TWO_OPT = "enhanced_two_opt"
OR_OPT = "or_opt"
HYBRID = "hybrid"

# Order matters: hybrid tries these in sequence and keeps the earliest on ties.
HYBRID_CANDIDATES = (NEAREST_NEIGHBOR, ENHANCED_TWO_OPT, OR_OPT)


@dataclass(frozen=True, slots=True)
class StrategyInfo:
    id: str
    name: str
    description: str


STRATEGY_CATALOG: tuple[StrategyInfo, ...] = (
    StrategyInfo(NEAREST_NEIGHBOR, "Nearest Neighbor", "Fast greedy algorithm, good for small orders"),
    StrategyInfo(
        ENHANCED_TWO_OPT,
        "Enhanced 2-Opt",
        "Balanced performance with warehouse-aware improvements",
    ),
    StrategyInfo(OR_OPT, "Or-Opt", "Local search with segment relocation"),
    StrategyInfo(HYBRID, "Hybrid Multi-Strategy", "Tries multiple approaches and selects the best result"),
)


def normalize_strategy(name: Optional[str]) -> str:
    """Map a requested strategy name onto a known one, falling back to nearest-neighbor."""
    normalized = (name or "").strip().lower()
    if normalized in {info.id for info in STRATEGY_CATALOG}:
        return normalized
    logging.warning(f"Unknown routing strategy '{name}', falling back to '{NEAREST_NEIGHBOR}'")
    return NEAREST_NEIGHBOR


class StrategySelector:
    def __init__(
        self,
        cost_model: CostModel | None = None,
        *,
        max_passes: int = DEFAULT_MAX_PASSES,
        restarts: int = 0,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.cost_model = cost_model or CostModel()
        self.constructor = NearestNeighborConstructor(self.cost_model)
        self.two_opt = TwoOptImprover(self.cost_model, max_passes=max_passes)
        self.or_opt = OrOptImprover(self.cost_model)
        self.restarts = restarts
        self.rng = rng

    def _apply_improver(
        self,
        strategy: str,
        route: Route,
        weights: CostWeights,
        constraints: RouteConstraints,
    ) -> Route:
        match strategy:
            case "enhanced_two_opt":
                if self.restarts > 0:
                    return self.two_opt.optimize_with_restarts(
                        route, weights, constraints, restarts=self.restarts, rng=self.rng
                    )
                return self.two_opt.improve(route, weights, constraints)
            case "or_opt":
                return self.or_opt.improve(route, weights, constraints)
            case _:
                return route

    def _cheapest(
        self,
        candidates: Sequence[tuple[str, Route]],
        weights: CostWeights,
        constraints: RouteConstraints,
    ) -> Route:
        best_name, best_route = candidates[0]
        best_cost = self.cost_model.route_cost(best_route, weights, constraints)
        for name, route in candidates[1:]:
            route_cost = self.cost_model.route_cost(route, weights, constraints)
            if route_cost < best_cost:
                best_name, best_route, best_cost = name, route, route_cost
        logging.debug(f"Hybrid strategy kept '{best_name}' with cost {best_cost:.2f}")
        return best_route

    def improve(
        self,
        route: Route,
        strategy_name: Optional[str],
        weights: CostWeights | None = None,
        constraints: RouteConstraints | None = None,
    ) -> Route:
        """Run the improvement stage of a strategy on an already constructed route."""
        weights = weights or CostWeights()
        constraints = constraints or RouteConstraints()
        strategy = normalize_strategy(strategy_name)
        if strategy == HYBRID:
            return self._cheapest(
                [(name, self._apply_improver(name, route, weights, constraints)) for name in HYBRID_CANDIDATES],
                weights,
                constraints,
            )
        return self._apply_improver(strategy, route, weights, constraints)

    def optimize(
        self,
        start: Location,
        targets: Sequence[Location],
        end: Optional[Location] = None,
        strategy_name: Optional[str] = ENHANCED_TWO_OPT,
        weights: CostWeights | None = None,
        constraints: RouteConstraints | None = None,
    ) -> Route:
        """Build a route visiting every target with the named strategy.

        ``hybrid`` runs nearest_neighbor, enhanced_two_opt and or_opt and returns the
        cheapest by weighted cost. An empty target list yields an empty route with
        no start or end stop.
        """
        if not targets:
            return []
        weights = weights or CostWeights()
        constraints = constraints or RouteConstraints()
        initial = self.constructor.construct(start, targets, end, weights, constraints)
        return self.improve(initial, strategy_name, weights, constraints)

    def plan_batches(
        self,
        start: Location,
        targets: Sequence[Location],
        end: Optional[Location] = None,
        strategy_name: Optional[str] = ENHANCED_TWO_OPT,
        weights: CostWeights | None = None,
        constraints: RouteConstraints | None = None,
    ) -> list[Route]:
        """Split the pick list by ``constraints.max_capacity`` and optimize each sub-route."""
        if not targets:
            return []
        weights = weights or CostWeights()
        constraints = constraints or RouteConstraints()
        batches = self.constructor.construct_capacity_constrained(start, targets, end, weights, constraints)
        return [self.improve(batch, strategy_name, weights, constraints) for batch in batches]
