"""Route optimization endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import OptimizeRequest, OptimizeResponse, StrategyInfoModel
from ...services.routing.service import OptimizationError, optimize_route
from ...services.routing.strategies import STRATEGY_CATALOG

router = APIRouter(tags=["routes"])


@router.post("/optimize", response_model=OptimizeResponse, status_code=status.HTTP_200_OK)
def optimize(payload: OptimizeRequest) -> OptimizeResponse:
    try:
        return optimize_route(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except OptimizationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Route optimization failed: {str(exc)}",
        ) from exc


@router.get("/strategies", response_model=list[StrategyInfoModel], status_code=status.HTTP_200_OK)
def list_strategies() -> list[StrategyInfoModel]:
    """Available routing strategies, in the order the UI should offer them."""
    return [
        StrategyInfoModel(id=info.id, name=info.name, description=info.description)
        for info in STRATEGY_CATALOG
    ]
