"""Database models for the stock alert monitor.

Users and alerts are owned by the account/alert management side of the
application; the monitor only reads users, flips alerts to triggered, and
appends to the two log tables. Quotes are never persisted.
"""
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from sqlalchemy import Column
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum_column(enum_cls: type[Enum], name: str) -> Column:
    """Enum column persisted by value ('below'), not by member name ('BELOW')."""
    return Column(
        SAEnum(enum_cls, name=name, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )


class AlertType(str, Enum):
    """Direction in which the price must cross the target."""

    BELOW = "below"
    ABOVE = "above"


class EmailStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class PriceCheckStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class User(SQLModel, table=True):
    """Account owning alerts; only the verified email matters here."""

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    password_hash: str = ""
    email_verified: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class Alert(SQLModel, table=True):
    """A standing price threshold for one symbol. Terminal once triggered."""

    __tablename__ = "alerts"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    symbol: str = Field(index=True)  # AAPL | MSFT
    stock_name: str | None = None
    alert_type: AlertType = Field(sa_column=_enum_column(AlertType, "alert_type"))
    target_price: Decimal = Field(max_digits=12, decimal_places=4)
    is_triggered: bool = Field(default=False, index=True)
    triggered_at: datetime | None = None
    triggered_price: Decimal | None = Field(default=None, max_digits=12, decimal_places=4)
    created_at: datetime = Field(default_factory=utcnow)


class EmailLog(SQLModel, table=True):
    """Delivery record for one notification attempt (pending -> sent | failed)."""

    __tablename__ = "email_logs"

    id: int | None = Field(default=None, primary_key=True)
    alert_id: int | None = Field(default=None, foreign_key="alerts.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    email_type: str = "alert"
    status: EmailStatus = Field(
        default=EmailStatus.PENDING,
        sa_column=_enum_column(EmailStatus, "email_status"),
    )
    attempts: int = 0
    last_attempt_at: datetime | None = None
    error_message: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class PriceCheckLog(SQLModel, table=True):
    """Write-once record of one price lookup for one symbol."""

    __tablename__ = "price_check_logs"

    id: int | None = Field(default=None, primary_key=True)
    symbol: str = Field(index=True)
    status: PriceCheckStatus = Field(sa_column=_enum_column(PriceCheckStatus, "price_check_status"))
    price: Decimal | None = Field(default=None, max_digits=12, decimal_places=4)
    source: str | None = None  # yahoo | finnhub
    error_message: str | None = None
    checked_at: datetime = Field(default_factory=utcnow)
