"""Per-stop and aggregate metrics for a finished route."""

from __future__ import annotations

from collections import defaultdict, deque
from typing import Sequence

from ...models.domain import PickTarget
from .cost import efficiency_score, estimate_time, is_turn, manhattan_distance
from .models import AnnotatedStop, Route, RouteMetrics

# Placeholder optimum: a flat fraction of the route's own length. It is not a lower
# bound on the shortest tour, so efficiency and compared_to_optimal are indicative only.
THEORETICAL_OPTIMAL_RATIO = 0.8


def annotate(
    route: Route,
    targets: Sequence[PickTarget],
) -> tuple[list[AnnotatedStop], RouteMetrics]:
    """Walk ``route`` once and derive leg and total metrics.

    Positions 1..len(targets) are the picks; the start and an appended end stop
    carry no SKU even when they share a location with a pick.
    """
    pending_skus: dict[str, deque[str]] = defaultdict(deque)
    for target in targets:
        pending_skus[target.location.location_code].append(target.sku)

    stops: list[AnnotatedStop] = []
    metrics = RouteMetrics()
    for index, location in enumerate(route):
        sku = None
        if 0 < index <= len(targets) and pending_skus[location.location_code]:
            sku = pending_skus[location.location_code].popleft()
        leg_distance = 0.0
        leg_time = 0.0
        aisle_crossing = False
        turn = False
        zone_transitions: list[str] = []

        if index > 0:
            previous = route[index - 1]
            leg_distance = manhattan_distance(previous.point, location.point)
            leg_time = estimate_time(leg_distance, 1 if sku else 0)
            if previous.aisle != location.aisle:
                aisle_crossing = True
                metrics.aisle_crossings += 1
            if previous.zone != location.zone:
                zone_transitions.append(f"{previous.zone} -> {location.zone}")
                metrics.zone_transitions += 1
            if index > 1 and is_turn(route[index - 2], previous, location):
                turn = True
                metrics.total_turns += 1

        metrics.total_distance += leg_distance
        metrics.total_time += leg_time
        stops.append(
            AnnotatedStop(
                sequence=index + 1,
                location_code=location.location_code,
                sku=sku,
                x=location.x,
                y=location.y,
                leg_distance=leg_distance,
                cumulative_distance=metrics.total_distance,
                estimated_time=leg_time,
                turn=turn,
                aisle_crossing=aisle_crossing,
                zone_transitions=zone_transitions,
                actions=["pick", "scan"] if sku else ["traverse"],
            )
        )

    theoretical_optimal = metrics.total_distance * THEORETICAL_OPTIMAL_RATIO
    metrics.efficiency_score = efficiency_score(metrics.total_distance, theoretical_optimal)
    if theoretical_optimal > 0:
        metrics.compared_to_optimal = (metrics.total_distance / theoretical_optimal - 1.0) * 100
    return stops, metrics
