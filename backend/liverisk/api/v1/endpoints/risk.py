"""
Risk API Endpoints

Endpoints for reading metrics/suggestions and sending ticks and actions.
"""

from fastapi import APIRouter, HTTPException, Query

from liverisk.schemas.risk import (
    ActivityEntry,
    InstrumentSnapshot,
    MetricsSnapshot,
    RiskState,
    Suggestion,
    Tick,
)
from liverisk.services.base import DispatcherStoppedError, InvalidInputError, QueueFullError
from liverisk.services.dispatcher import get_dispatcher

router = APIRouter()


@router.get("/state", response_model=RiskState)
async def get_state():
    """
    Get the latest metrics and suggestions in one payload.
    """
    return get_dispatcher().state


@router.get("/metrics", response_model=list[MetricsSnapshot])
async def get_metrics():
    """
    Get risk metrics for every instrument.
    """
    return get_dispatcher().state.metrics


@router.get("/suggestions", response_model=list[Suggestion])
async def get_suggestions():
    """
    Get the current suggestion set.
    """
    return get_dispatcher().state.suggestions


@router.get("/instruments")
async def list_instruments():
    """
    List watched instruments with their current prices.
    """
    snapshots = get_dispatcher().store.snapshots()
    return {
        "instruments": [
            {"symbol": s.symbol, "current_price": s.current_price} for s in snapshots
        ]
    }


@router.get("/instruments/{symbol}", response_model=InstrumentSnapshot)
async def get_instrument(symbol: str):
    """
    Get price history (oldest first) and recent quotes (newest first).
    """
    store = get_dispatcher().store
    if symbol not in store:
        raise HTTPException(status_code=404, detail=f"Instrument not found: {symbol}")
    return store.snapshot(symbol)


@router.get("/alternatives/{symbol}")
async def get_alternatives(symbol: str):
    """
    Get substitute symbols for an instrument (defaults for unknown symbols).
    """
    mapper = get_dispatcher().alternatives
    return {"symbol": symbol.upper(), "alternatives": mapper.lookup(symbol)}


@router.post("/ticks", response_model=RiskState)
async def submit_tick(tick: Tick):
    """
    Submit an external tick.

    The tick is queued behind any pending feed ticks.
    Responds once it has been applied, with the resulting state.
    """
    dispatcher = get_dispatcher()
    if not dispatcher.is_running:
        raise HTTPException(status_code=503, detail="Risk engine is not running")

    try:
        future = dispatcher.submit_nowait(tick)
    except QueueFullError as e:
        raise HTTPException(status_code=503, detail=e.message)

    try:
        return await future
    except InvalidInputError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": e.message, "details": e.details},
        )
    except DispatcherStoppedError as e:
        raise HTTPException(status_code=503, detail=e.message)


@router.post("/stop-loss/{symbol}", response_model=ActivityEntry)
async def apply_stop_loss(symbol: str):
    """
    Acknowledge a stop-loss request for an instrument.

    Recorded in the activity log; prices are not changed.
    """
    try:
        return get_dispatcher().apply_stop_loss(symbol)
    except InvalidInputError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.get("/activity", response_model=list[ActivityEntry])
async def get_activity(limit: int = Query(default=50, ge=1, le=200)):
    """
    Get recent engine activity, newest first.
    """
    return get_dispatcher().activity.entries(limit)
