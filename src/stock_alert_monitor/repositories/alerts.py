"""Persistence surface used by the monitor: active alerts, trigger updates, logs.

Every method opens its own short session so one failed write never poisons
the next. SQLAlchemy errors are re-raised as PersistenceError.
"""
import logging
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from stock_alert_monitor.db import (Alert, EmailLog, EmailStatus,
                                    PriceCheckLog, PriceCheckStatus, User)
from stock_alert_monitor.db.sessions import get_session
from stock_alert_monitor.exceptions import PersistenceError
from stock_alert_monitor.schemas import ActiveAlert

logger = logging.getLogger(__name__)


class AlertRepository:
    """Reads untriggered alerts and records what the monitor did with them."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def _session(self, action: str) -> Generator[Session, None, None]:
        try:
            with get_session(self._engine) as session:
                yield session
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to {action}: {e}") from e

    def get_active_alerts(self) -> list[ActiveAlert]:
        """Return every alert with is_triggered = false, joined with the owner's email."""
        statement = (
            select(Alert, User.email)
            .join(User, Alert.user_id == User.id)
            .where(Alert.is_triggered == False)  # noqa: E712
            .order_by(Alert.id)
        )
        with self._session("load active alerts") as session:
            rows = session.exec(statement).all()
            return [
                ActiveAlert(
                    id=alert.id,
                    user_id=alert.user_id,
                    email=email,
                    symbol=alert.symbol,
                    stock_name=alert.stock_name,
                    alert_type=alert.alert_type,
                    target_price=alert.target_price,
                )
                for alert, email in rows
            ]

    def mark_triggered(
        self, alert_id: int, price: Decimal, triggered_at: datetime
    ) -> bool:
        """Flip an alert to triggered, only if it is still untriggered.

        Returns:
            True if this call won the row, False if it was already triggered
            (or no longer exists).
        """
        alerts = Alert.__table__
        statement = (
            update(alerts)
            .where(alerts.c.id == alert_id, alerts.c.is_triggered == False)  # noqa: E712
            .values(is_triggered=True, triggered_at=triggered_at, triggered_price=price)
        )
        with self._session(f"mark alert {alert_id} as triggered") as session:
            result = session.connection().execute(statement)
            return result.rowcount == 1

    def create_email_log(
        self, alert_id: int, user_id: int, email_type: str = "alert"
    ) -> int:
        """Insert a pending email log row and return its id."""
        log = EmailLog(
            alert_id=alert_id,
            user_id=user_id,
            email_type=email_type,
            status=EmailStatus.PENDING,
            attempts=0,
        )
        with self._session(f"create email log for alert {alert_id}") as session:
            session.add(log)
            session.flush()
            return log.id

    def update_email_log(
        self,
        log_id: int,
        status: EmailStatus,
        attempts: int,
        error_message: str | None = None,
    ) -> None:
        """Record the outcome of a send attempt on an existing email log."""
        with self._session(f"update email log {log_id}") as session:
            log = session.get(EmailLog, log_id)
            if log is None:
                raise PersistenceError(f"Email log {log_id} not found")
            log.status = status
            log.attempts = attempts
            log.last_attempt_at = datetime.now(timezone.utc)
            log.error_message = error_message
            session.add(log)

    def log_price_check(
        self,
        symbol: str,
        status: PriceCheckStatus,
        *,
        price: Decimal | None = None,
        source: str | None = None,
        error_message: str | None = None,
    ) -> None:
        """Append one price-check row."""
        entry = PriceCheckLog(
            symbol=symbol,
            status=status,
            price=price,
            source=source,
            error_message=error_message,
        )
        with self._session(f"log price check for {symbol}") as session:
            session.add(entry)
