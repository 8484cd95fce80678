"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import List, Optional

from ...models.domain import Location

Route = List[Location]


@dataclass(slots=True)
class CostWeights:
    distance_weight: float = 1.0
    aisle_crossing_penalty: float = 5.0
    turn_penalty: float = 2.0
    blocked_zone_penalty: float = 100.0
    capacity_violation_penalty: float = 50.0

    def __post_init__(self) -> None:
        for name in (
            "distance_weight",
            "aisle_crossing_penalty",
            "turn_penalty",
            "blocked_zone_penalty",
            "capacity_violation_penalty",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"Cost weight '{name}' must be non-negative.")


@dataclass(slots=True)
class TimeWindow:
    location_code: str
    start_time: time
    end_time: time


@dataclass(slots=True)
class RouteConstraints:
    max_capacity: Optional[int] = None
    max_time_minutes: Optional[int] = None
    avoid_blocked_zones: bool = True
    allow_aisle_crossing: bool = True
    time_windows: List[TimeWindow] = field(default_factory=list)


@dataclass(slots=True)
class AnnotatedStop:
    sequence: int
    location_code: str
    sku: Optional[str]
    x: int
    y: int
    leg_distance: float
    cumulative_distance: float
    estimated_time: float
    turn: bool
    aisle_crossing: bool
    zone_transitions: List[str]
    actions: List[str]


@dataclass(slots=True)
class RouteMetrics:
    total_distance: float = 0.0
    total_time: float = 0.0
    aisle_crossings: int = 0
    total_turns: int = 0
    zone_transitions: int = 0
    efficiency_score: float = 0.0
    compared_to_optimal: float = 0.0


@dataclass(slots=True)
class OptimizationResult:
    strategy: str
    route: Route
    stops: List[AnnotatedStop]
    metrics: RouteMetrics
    batches: List[Route] = field(default_factory=list)
