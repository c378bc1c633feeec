"""Health and manual cycle-trigger routes.

The cron route is what an external scheduler (or an operator) calls to run
a price check immediately; it shares run_cycle() with the in-process timer.
"""
import logging

from fastapi import APIRouter, Depends

from stock_alert_monitor.deps import MonitorDep, require_cron_secret
from stock_alert_monitor.schemas import (CronResponse, CycleStatus,
                                         HealthResponse)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["monitor"])

_MESSAGES = {
    CycleStatus.MARKET_CLOSED: "Market is closed, skipping price check",
    CycleStatus.NO_ALERTS: "No active alerts to check",
    CycleStatus.COMPLETED: "Price check completed",
    CycleStatus.ERROR: "Price check failed",
}


@router.get("/health", response_model=HealthResponse)
async def health(monitor: MonitorDep) -> HealthResponse:
    """Liveness plus whether the market is currently open."""
    return HealthResponse(market_open=monitor.is_market_open())


@router.api_route(
    "/cron",
    methods=["GET", "POST"],
    response_model=CronResponse,
    dependencies=[Depends(require_cron_secret)],
)
async def run_cycle_now(monitor: MonitorDep) -> CronResponse:
    """Run one monitor cycle now and report what it did."""
    summary = await monitor.run_cycle()
    return CronResponse(
        success=summary.status != CycleStatus.ERROR,
        message=_MESSAGES[summary.status],
        summary=summary,
    )
