"""Pydantic schemas for runtime values and API payloads. Not persisted to DB."""
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from stock_alert_monitor.db import AlertType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Quote(BaseModel):
    """One price observation, tagged with the provider that produced it."""

    symbol: str
    price: Decimal
    source: str  # yahoo | finnhub
    timestamp: datetime = Field(default_factory=_utcnow)


class ActiveAlert(BaseModel):
    """An untriggered alert joined with its owner's email address."""

    id: int
    user_id: int
    email: str
    symbol: str
    stock_name: str | None = None
    alert_type: AlertType
    target_price: Decimal


class AlertNotification(BaseModel):
    """Everything the notifier needs to render one alert email."""

    recipient: str
    symbol: str
    stock_name: str | None = None
    alert_type: AlertType
    target_price: Decimal
    current_price: Decimal
    triggered_at: datetime


class CycleStatus(str, Enum):
    MARKET_CLOSED = "market_closed"
    NO_ALERTS = "no_alerts"
    COMPLETED = "completed"
    ERROR = "error"


class CycleSummary(BaseModel):
    """Outcome counters for one monitor cycle."""

    status: CycleStatus = CycleStatus.COMPLETED
    alerts_checked: int = 0
    symbols_checked: int = 0
    prices_fetched: int = 0
    triggered: int = 0
    notified: int = 0
    notify_failed: int = 0
    started_at: datetime = Field(default_factory=_utcnow)
    finished_at: datetime | None = None


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: datetime = Field(default_factory=_utcnow)
    market_open: bool


class CronResponse(BaseModel):
    """Payload returned by the manual cycle trigger."""

    success: bool
    message: str
    timestamp: datetime = Field(default_factory=_utcnow)
    summary: CycleSummary | None = None


__all__ = [
    "ActiveAlert",
    "AlertNotification",
    "CronResponse",
    "CycleStatus",
    "CycleSummary",
    "HealthResponse",
    "Quote",
]
