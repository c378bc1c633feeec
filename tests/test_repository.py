from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, create_engine

from stock_alert_monitor.db import (Alert, AlertType, EmailLog, EmailStatus,
                                    PriceCheckLog, PriceCheckStatus, User)
from stock_alert_monitor.exceptions import PersistenceError
from stock_alert_monitor.repositories import AlertRepository

NOW = datetime(2024, 1, 9, 15, 0, tzinfo=timezone.utc)


def test_active_alerts_join_owner_email(repository, add_alert):
    first = add_alert("AAPL", AlertType.BELOW, "150.25")
    add_alert("MSFT", AlertType.ABOVE, "400", triggered=True)
    third = add_alert("NVDA", AlertType.ABOVE, "500")

    alerts = repository.get_active_alerts()

    assert [a.id for a in alerts] == [first, third]
    assert alerts[0].email == "trader@example.com"
    assert alerts[0].alert_type == AlertType.BELOW
    assert alerts[0].target_price == Decimal("150.25")
    assert alerts[1].stock_name == "NVDA Inc."


def test_mark_triggered_only_wins_once(repository, add_alert, fetch_rows):
    alert_id = add_alert("AAPL", AlertType.BELOW, "150")

    assert repository.mark_triggered(alert_id, Decimal("149.5"), NOW) is True
    assert repository.mark_triggered(alert_id, Decimal("140"), NOW) is False

    (alert,) = fetch_rows(Alert)
    assert alert.is_triggered is True
    assert alert.triggered_price == Decimal("149.5")
    assert repository.get_active_alerts() == []


def test_mark_triggered_missing_alert(repository):
    assert repository.mark_triggered(999, Decimal("1"), NOW) is False


def test_email_log_lifecycle(repository, add_alert, user_id, fetch_rows):
    alert_id = add_alert("AAPL", AlertType.BELOW, "150")

    log_id = repository.create_email_log(alert_id, user_id)
    (pending,) = fetch_rows(EmailLog)
    assert pending.id == log_id
    assert pending.status == EmailStatus.PENDING
    assert pending.attempts == 0
    assert pending.email_type == "alert"

    repository.update_email_log(log_id, EmailStatus.FAILED, 3, "timed out")
    (failed,) = fetch_rows(EmailLog)
    assert failed.status == EmailStatus.FAILED
    assert failed.attempts == 3
    assert failed.error_message == "timed out"
    assert failed.last_attempt_at is not None


def test_update_unknown_email_log(repository):
    with pytest.raises(PersistenceError, match="not found"):
        repository.update_email_log(42, EmailStatus.SENT, 1)


def test_price_check_rows(repository, fetch_rows):
    repository.log_price_check(
        "AAPL", PriceCheckStatus.SUCCESS, price=Decimal("187.32"), source="yahoo"
    )
    repository.log_price_check(
        "NOPE", PriceCheckStatus.FAILED, error_message="yahoo: not found"
    )

    rows = {r.symbol: r for r in fetch_rows(PriceCheckLog)}
    assert rows["AAPL"].price == Decimal("187.32")
    assert rows["AAPL"].source == "yahoo"
    assert rows["NOPE"].status == PriceCheckStatus.FAILED
    assert rows["NOPE"].price is None


def test_enum_values_are_stored(engine, add_alert):
    add_alert("AAPL", AlertType.ABOVE, "1")
    with Session(engine) as session:
        stored = session.connection().exec_driver_sql("SELECT alert_type FROM alerts").scalar()
    assert stored == "above"


def test_database_errors_become_persistence_errors():
    bare = create_engine("sqlite://")
    repository = AlertRepository(bare)

    with pytest.raises(PersistenceError, match="load active alerts"):
        repository.get_active_alerts()
    with pytest.raises(PersistenceError):
        repository.log_price_check("AAPL", PriceCheckStatus.FAILED)
    bare.dispose()


def test_user_email_is_unique(engine, user_id):
    with Session(engine) as session:
        session.add(User(email="trader@example.com", password_hash="y"))
        with pytest.raises(IntegrityError):
            session.commit()
