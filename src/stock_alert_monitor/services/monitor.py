"""Periodic price check: load active alerts, fetch prices, fire triggered alerts.

One cycle runs GATE -> LOAD -> FETCH -> EVALUATE -> COMMIT -> DONE. Commit
order per alert is email log -> email -> mark triggered, so an alert is only
marked triggered after its owner was notified. If marking fails after a
successful send the alert fires again next cycle (duplicate email); a failed
send leaves the alert active for the next cycle.
"""
import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal

from stock_alert_monitor.db import AlertType, EmailStatus
from stock_alert_monitor.exceptions import (NoPriceAvailable,
                                            PersistenceError, SendError)
from stock_alert_monitor.market_calendar import is_market_open
from stock_alert_monitor.notifications import EmailNotifier
from stock_alert_monitor.repositories import AlertRepository
from stock_alert_monitor.schemas import (ActiveAlert, AlertNotification,
                                         CycleStatus, CycleSummary, Quote)
from stock_alert_monitor.services.quote_service import QuoteService

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def should_trigger(alert_type: AlertType, target_price: Decimal, current_price: Decimal) -> bool:
    """Inclusive threshold check: below fires at price <= target, above at price >= target."""
    if alert_type == AlertType.BELOW:
        return current_price <= target_price
    if alert_type == AlertType.ABOVE:
        return current_price >= target_price
    return False


class PriceMonitor:
    """Runs monitor cycles against the alert store.

    All tuning (batch size, inter-batch pause, clock) is injected so that a
    cycle has no hidden process-wide state.
    """

    def __init__(
        self,
        repository: AlertRepository,
        quotes: QuoteService,
        notifier: EmailNotifier,
        *,
        batch_size: int = 10,
        batch_delay: float = 0.5,
        clock: Clock | None = None,
    ) -> None:
        self._repository = repository
        self._quotes = quotes
        self._notifier = notifier
        self._batch_size = max(1, batch_size)
        self._batch_delay = batch_delay
        self._clock = clock or _utcnow

    @property
    def quotes(self) -> QuoteService:
        return self._quotes

    def is_market_open(self) -> bool:
        return is_market_open(self._clock())

    async def close(self) -> None:
        """Release provider resources (HTTP clients)."""
        await self._quotes.close()

    async def run_cycle(self) -> CycleSummary:
        """Run one full check. Never raises; failures are logged and counted."""
        summary = CycleSummary(started_at=self._clock())
        try:
            await self._run(summary)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Price monitor cycle failed")
            summary.status = CycleStatus.ERROR
        summary.finished_at = self._clock()
        return summary

    async def _run(self, summary: CycleSummary) -> None:
        if not self.is_market_open():
            logger.info("Market closed, skipping price check")
            summary.status = CycleStatus.MARKET_CLOSED
            return

        logger.info("Starting price check")
        alerts = await asyncio.to_thread(self._repository.get_active_alerts)
        summary.alerts_checked = len(alerts)
        if not alerts:
            logger.info("No active alerts to check")
            summary.status = CycleStatus.NO_ALERTS
            return

        symbols = sorted({alert.symbol for alert in alerts})
        summary.symbols_checked = len(symbols)
        logger.info("Checking %d symbols for %d alerts", len(symbols), len(alerts))

        prices = await self.fetch_prices(symbols)
        summary.prices_fetched = len(prices)

        for alert in alerts:
            quote = prices.get(alert.symbol)
            if quote is None:
                logger.warning(
                    "Skipping alert %s (%s): no price data available", alert.id, alert.symbol
                )
                continue
            if not should_trigger(alert.alert_type, alert.target_price, quote.price):
                continue

            summary.triggered += 1
            logger.info(
                "Alert triggered: %s %s $%s (current: $%s)",
                alert.symbol, alert.alert_type.value, alert.target_price, quote.price,
            )
            try:
                notified = await self._commit(alert, quote)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Unexpected error committing alert %s", alert.id)
                notified = False
            if notified:
                summary.notified += 1
            else:
                summary.notify_failed += 1

        logger.info(
            "Price check completed: %d triggered, %d notified, %d failed",
            summary.triggered, summary.notified, summary.notify_failed,
        )

    async def fetch_prices(self, symbols: list[str]) -> dict[str, Quote]:
        """Fetch quotes in batches; symbols without a price are left out of the result.

        Each batch is fetched concurrently and batches are separated by the
        configured pause to stay under provider rate limits.
        """
        prices: dict[str, Quote] = {}
        for start in range(0, len(symbols), self._batch_size):
            batch = symbols[start:start + self._batch_size]
            results = await asyncio.gather(
                *[self._quotes.get_price(symbol) for symbol in batch],
                return_exceptions=True,
            )
            for symbol, result in zip(batch, results):
                if isinstance(result, Quote):
                    prices[symbol] = result
                elif isinstance(result, NoPriceAvailable):
                    logger.error("Failed to fetch price for %s from all sources: %s", symbol, result)
                else:
                    logger.error("Unexpected error fetching %s: %r", symbol, result)
            if start + self._batch_size < len(symbols):
                await asyncio.sleep(self._batch_delay)
        return prices

    async def _commit(self, alert: ActiveAlert, quote: Quote) -> bool:
        """Notify the owner, then mark the alert triggered. Returns True if the email went out."""
        triggered_at = self._clock()

        email_log_id: int | None = None
        try:
            email_log_id = await asyncio.to_thread(
                self._repository.create_email_log, alert.id, alert.user_id
            )
        except PersistenceError as e:
            logger.error("Failed to create email log for alert %s: %s", alert.id, e)

        notification = AlertNotification(
            recipient=alert.email,
            symbol=alert.symbol,
            stock_name=alert.stock_name,
            alert_type=alert.alert_type,
            target_price=alert.target_price,
            current_price=quote.price,
            triggered_at=triggered_at,
        )
        try:
            attempts = await self._notifier.send_alert(notification)
        except SendError as e:
            logger.error("Failed to send email for alert %s: %s", alert.id, e)
            await self._update_email_log(email_log_id, EmailStatus.FAILED, e.attempts, str(e))
            logger.warning(
                "Alert %s NOT marked as triggered - email failed, will retry next check", alert.id
            )
            return False
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("Unexpected error sending email for alert %s", alert.id)
            await self._update_email_log(
                email_log_id, EmailStatus.FAILED, 1, str(e) or type(e).__name__
            )
            return False

        await self._update_email_log(email_log_id, EmailStatus.SENT, attempts)
        try:
            marked = await asyncio.to_thread(
                self._repository.mark_triggered, alert.id, quote.price, triggered_at
            )
        except PersistenceError as e:
            logger.error(
                "Failed to mark alert %s as triggered after notifying %s; it will fire again next check: %s",
                alert.id, alert.email, e,
            )
            return True
        if marked:
            logger.info("Alert %s marked as triggered", alert.id)
        else:
            logger.warning("Alert %s was already triggered by another cycle", alert.id)
        return True

    async def _update_email_log(
        self,
        log_id: int | None,
        status: EmailStatus,
        attempts: int,
        error_message: str | None = None,
    ) -> None:
        if log_id is None:
            return
        try:
            await asyncio.to_thread(
                self._repository.update_email_log, log_id, status, attempts, error_message
            )
        except PersistenceError as e:
            logger.error("Failed to update email log %s to %s: %s", log_id, status.value, e)
