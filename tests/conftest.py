import asyncio
import smtplib
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlmodel import Session, select

from stock_alert_monitor.db import Alert, AlertType, EmailLog, PriceCheckLog, User
from stock_alert_monitor.db.sessions import create_db_engine, init_db
from stock_alert_monitor.exceptions import ProviderFetchError
from stock_alert_monitor.notifications import EmailNotifier
from stock_alert_monitor.providers.core import QuoteProviderABC
from stock_alert_monitor.repositories import AlertRepository
from stock_alert_monitor.schemas import Quote
from stock_alert_monitor.services import PriceMonitor, QuoteService

# Tuesday 2024-01-09 10:00 ET (EST, UTC-5)
MARKET_OPEN_AT = datetime(2024, 1, 9, 15, 0, tzinfo=timezone.utc)
# Saturday 2024-01-13 12:00 ET
SATURDAY_NOON = datetime(2024, 1, 13, 17, 0, tzinfo=timezone.utc)
# Tuesday 2024-01-09 08:00 ET
TUESDAY_EARLY = datetime(2024, 1, 9, 13, 0, tzinfo=timezone.utc)


class FakeProvider(QuoteProviderABC):
    """In-process provider: prices maps symbol -> price or exception to raise."""

    def __init__(self, name: str, prices: dict | None = None, delay: float = 0.0) -> None:
        self.name = name
        self.prices = prices or {}
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def get_quote(self, symbol: str) -> Quote:
        self.calls.append(symbol)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            value = self.prices.get(symbol)
            if isinstance(value, Exception):
                raise value
            if value is None:
                raise ProviderFetchError(self.name, symbol, f"Stock '{symbol}' not found")
            return Quote(symbol=symbol, price=Decimal(str(value)), source=self.name)
        finally:
            self.in_flight -= 1

    async def close(self) -> None:
        self.closed = True


class FakeTransport:
    """Records sent messages; fails the first ``failures`` sends with ``error``."""

    def __init__(self, failures: int = 0, error: Exception | None = None) -> None:
        self.failures = failures
        self.error = error or smtplib.SMTPServerDisconnected("Connection unexpectedly closed")
        self.attempts = 0
        self.sent = []

    def send(self, message) -> None:
        self.attempts += 1
        if self.attempts <= self.failures:
            raise self.error
        self.sent.append(message)


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def engine(tmp_path):
    # file-backed so repository calls from worker threads get their own connections
    engine = create_db_engine(f"sqlite:///{tmp_path / 'alerts.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(engine) -> AlertRepository:
    return AlertRepository(engine)


@pytest.fixture
def user_id(engine) -> int:
    with Session(engine) as session:
        user = User(email="trader@example.com", password_hash="x", email_verified=True)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user.id


@pytest.fixture
def add_alert(engine, user_id):
    def _add(symbol: str, alert_type: AlertType, target: str, *, triggered: bool = False) -> int:
        with Session(engine) as session:
            alert = Alert(
                user_id=user_id,
                symbol=symbol,
                stock_name=f"{symbol} Inc.",
                alert_type=alert_type,
                target_price=Decimal(target),
                is_triggered=triggered,
            )
            session.add(alert)
            session.commit()
            session.refresh(alert)
            return alert.id

    return _add


@pytest.fixture
def fetch_rows(engine):
    def _fetch(model):
        with Session(engine) as session:
            return session.exec(select(model)).all()

    return _fetch


@pytest.fixture
def row_counts(fetch_rows):
    def _counts() -> dict[str, int]:
        return {
            model.__name__: len(fetch_rows(model))
            for model in (Alert, EmailLog, PriceCheckLog)
        }

    return _counts


@pytest.fixture
def primary() -> FakeProvider:
    return FakeProvider("yahoo")


@pytest.fixture
def secondary() -> FakeProvider:
    return FakeProvider("finnhub")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(MARKET_OPEN_AT)


@pytest.fixture
def notifier(transport) -> EmailNotifier:
    return EmailNotifier(transport, "alerts@stocktracker.com", max_attempts=3, retry_delay=0)


@pytest.fixture
def monitor(repository, primary, secondary, notifier, clock) -> PriceMonitor:
    quotes = QuoteService(primary, secondary, repository)
    return PriceMonitor(
        repository,
        quotes,
        notifier,
        batch_size=10,
        batch_delay=0,
        clock=clock,
    )
