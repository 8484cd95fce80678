"""Route optimization request/response schemas."""

from __future__ import annotations

from datetime import time
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase JSON field names while accepting snake_case too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CostWeightsModel(CamelModel):
    distance_weight: float = Field(1.0, ge=0)
    aisle_crossing_penalty: float = Field(5.0, ge=0)
    turn_penalty: float = Field(2.0, ge=0)
    blocked_zone_penalty: float = Field(100.0, ge=0, description="Reserved; no leg is blocked yet.")
    capacity_violation_penalty: float = Field(50.0, ge=0, description="Reserved for capacity costs.")


class TimeWindowModel(CamelModel):
    location_code: str
    start_time: time
    end_time: time


class RouteConstraintsModel(CamelModel):
    max_capacity: Optional[int] = Field(None, ge=1, description="Maximum picks per batch.")
    max_time_minutes: Optional[int] = Field(None, ge=1, description="Advisory only.")
    avoid_blocked_zones: bool = True
    allow_aisle_crossing: bool = Field(True, description="Not enforced as a hard constraint.")
    time_windows: Optional[List[TimeWindowModel]] = None


class OptimizeRequest(CamelModel):
    start_location_code: Optional[str] = Field(default=None, description="Start location; defaults to (0, 0).")
    end_location_code: Optional[str] = Field(default=None, description="End location; defaults to the start.")
    skus: List[str] = Field(default_factory=list)
    strategy: Optional[str] = Field(default=None, description="Routing strategy id; see GET /strategies.")
    weights: Optional[CostWeightsModel] = None
    constraints: Optional[RouteConstraintsModel] = None
    picker_id: Optional[str] = Field(default=None, description="Picker the route is intended for.")
    unresolved_sku_policy: Optional[Literal["drop", "fail"]] = Field(
        default=None,
        description="Override the configured handling of SKUs without inventory.",
    )


class RouteStopModel(CamelModel):
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


class RouteMetricsModel(CamelModel):
    total_distance: float
    total_time: float
    aisle_crossings: int
    total_turns: int
    zone_transitions: int
    efficiency_score: float
    compared_to_optimal: float = Field(
        description="Percent above a placeholder optimum (80% of this route); not a true lower bound.",
    )


class RouteBatchModel(CamelModel):
    batch: int
    pick_count: int
    total_distance: float
    ordered_stops: List[RouteStopModel]


class OptimizeResponse(CamelModel):
    ordered_stops: List[RouteStopModel]
    total_distance: float
    strategy: str
    metrics: Optional[RouteMetricsModel] = None
    batches: List[RouteBatchModel] = Field(default_factory=list)
    picker_id: Optional[str] = None


class StrategyInfoModel(CamelModel):
    id: str
    name: str
    description: str
