"""Route optimization orchestration service."""

from __future__ import annotations

import logging
import random
from dataclasses import asdict
from typing import Optional, Sequence

from ...config import settings
from ...data.inventory_repository import UnknownSkuError, resolve_end, resolve_start, resolve_targets
from ...models.domain import Location, PickTarget
from ...schemas.routing import (
    CostWeightsModel,
    OptimizeRequest,
    OptimizeResponse,
    RouteBatchModel,
    RouteConstraintsModel,
    RouteMetricsModel,
    RouteStopModel,
)
from .annotator import annotate
from .construction import is_distinct_end
from .models import (
    AnnotatedStop,
    CostWeights,
    OptimizationResult,
    Route,
    RouteConstraints,
    RouteMetrics,
    TimeWindow,
)
from .strategies import StrategySelector


class OptimizationError(RuntimeError):
    """Raised when route optimization fails for reasons other than a bad request."""


def _build_weights(payload: Optional[CostWeightsModel]) -> CostWeights:
    if payload is None:
        return CostWeights()
    return CostWeights(**payload.model_dump())


def _build_constraints(payload: Optional[RouteConstraintsModel]) -> RouteConstraints:
    if payload is None:
        return RouteConstraints()
    return RouteConstraints(
        max_capacity=payload.max_capacity,
        max_time_minutes=payload.max_time_minutes,
        avoid_blocked_zones=payload.avoid_blocked_zones,
        allow_aisle_crossing=payload.allow_aisle_crossing,
        time_windows=[
            TimeWindow(
                location_code=window.location_code,
                start_time=window.start_time,
                end_time=window.end_time,
            )
            for window in payload.time_windows or []
        ],
    )


def _resolve_endpoints(start_code: Optional[str], end_code: Optional[str]) -> tuple[Location, Location]:
    start = resolve_start(start_code)
    if start is None:
        if start_code:
            logging.warning(f"Start location '{start_code}' not found, starting at (0, 0)")
        start = Location.default(0, 0)
    end = resolve_end(end_code)
    if end is None:
        if end_code:
            logging.warning(f"End location '{end_code}' not found, ending at the last pick")
        # Same location as the start, so no separate end stop is appended.
        end = start
    return start, end


def _make_selector() -> StrategySelector:
    rng = random.Random(settings.random_seed) if settings.two_opt_restarts else None
    return StrategySelector(
        max_passes=settings.two_opt_max_passes,
        restarts=settings.two_opt_restarts,
        rng=rng,
    )


def _batch_targets(batch: Route, targets: Sequence[PickTarget], pick_count: int) -> list[PickTarget]:
    pool = list(targets)
    selected: list[PickTarget] = []
    for location in batch[1 : 1 + pick_count]:
        for position, target in enumerate(pool):
            if target.location.location_code == location.location_code:
                selected.append(pool.pop(position))
                break
    return selected


def run_optimization(
    *,
    start: Location,
    end: Location,
    targets: Sequence[PickTarget],
    strategy: str,
    weights: CostWeights,
    constraints: RouteConstraints,
    selector: StrategySelector | None = None,
) -> OptimizationResult:
    """Optimize and annotate a route for already-resolved inputs."""
    if not targets:
        return OptimizationResult(strategy=strategy, route=[], stops=[], metrics=RouteMetrics())

    selector = selector or _make_selector()
    pick_locations = [target.location for target in targets]
    route = selector.optimize(start, pick_locations, end, strategy, weights, constraints)
    stops, metrics = annotate(route, targets)

    batches: list[Route] = []
    if constraints.max_capacity is not None:
        batches = selector.plan_batches(start, pick_locations, end, strategy, weights, constraints)
    return OptimizationResult(strategy=strategy, route=route, stops=stops, metrics=metrics, batches=batches)


def _stop_models(stops: Sequence[AnnotatedStop]) -> list[RouteStopModel]:
    return [RouteStopModel(**asdict(stop)) for stop in stops]


def _batch_models(
    result: OptimizationResult,
    start: Location,
    end: Location,
    targets: Sequence[PickTarget],
) -> list[RouteBatchModel]:
    models: list[RouteBatchModel] = []
    remaining = list(targets)
    for number, batch in enumerate(result.batches, start=1):
        pick_count = len(batch) - 1 - (1 if is_distinct_end(start, end) else 0)
        batch_targets = _batch_targets(batch, remaining, pick_count)
        for target in batch_targets:
            remaining.remove(target)
        stops, metrics = annotate(batch, batch_targets)
        models.append(
            RouteBatchModel(
                batch=number,
                pick_count=pick_count,
                total_distance=metrics.total_distance,
                ordered_stops=_stop_models(stops),
            )
        )
    return models


def optimize_route(payload: OptimizeRequest) -> OptimizeResponse:
    strategy = payload.strategy or settings.default_strategy
    weights = _build_weights(payload.weights)
    constraints = _build_constraints(payload.constraints)

    try:
        start, end = _resolve_endpoints(payload.start_location_code, payload.end_location_code)
        targets = resolve_targets(payload.skus, payload.unresolved_sku_policy)
    except UnknownSkuError:
        raise
    except Exception as exc:
        logging.exception(f"Failed to resolve pick list: {exc}")
        raise OptimizationError(f"Route optimization failed: {exc}") from exc

    logging.info(
        f"Optimizing pick route: {len(targets)} of {len(payload.skus)} SKUs resolved, strategy '{strategy}'"
    )
    if not targets:
        return OptimizeResponse(ordered_stops=[], total_distance=0.0, strategy=strategy, picker_id=payload.picker_id)

    try:
        result = run_optimization(
            start=start,
            end=end,
            targets=targets,
            strategy=strategy,
            weights=weights,
            constraints=constraints,
        )
        batches = _batch_models(result, start, end, targets)
    except Exception as exc:
        logging.exception(f"Route optimization failed: {exc}")
        raise OptimizationError(f"Route optimization failed: {exc}") from exc

    logging.info(
        f"Route ready: {len(result.stops)} stops, distance {result.metrics.total_distance:.1f}, "
        f"{len(batches)} batch(es)"
    )
    return OptimizeResponse(
        ordered_stops=_stop_models(result.stops),
        total_distance=result.metrics.total_distance,
        strategy=strategy,
        metrics=RouteMetricsModel(**asdict(result.metrics)),
        batches=batches,
        picker_id=payload.picker_id,
    )
