"""Price lookup with provider fallback and per-call price-check logging."""
import asyncio
import logging

from stock_alert_monitor.db import PriceCheckStatus
from stock_alert_monitor.exceptions import (NoPriceAvailable,
                                            PersistenceError,
                                            ProviderFetchError)
from stock_alert_monitor.providers.core import (QuoteProviderABC,
                                                normalize_stock_symbol)
from stock_alert_monitor.repositories import AlertRepository
from stock_alert_monitor.schemas import Quote

logger = logging.getLogger(__name__)


class QuoteService:
    """Fetches a price from the primary provider, falling back to the secondary.

    Either provider may be None (not configured); a missing provider is
    skipped. Each get_price() call writes exactly one price_check_logs row.
    """

    def __init__(
        self,
        primary: QuoteProviderABC | None,
        secondary: QuoteProviderABC | None,
        repository: AlertRepository,
    ) -> None:
        self._providers = [p for p in (primary, secondary) if p is not None]
        self._repository = repository

    @property
    def providers(self) -> list[QuoteProviderABC]:
        return list(self._providers)

    async def get_price(self, symbol: str) -> Quote:
        """Return the first successful quote for symbol.

        Raises:
            NoPriceAvailable: every configured provider failed; the message
                carries each provider's error.
        """
        sym = normalize_stock_symbol(symbol)
        errors: list[str] = []
        for provider in self._providers:
            try:
                quote = await provider.get_quote(sym)
            except ProviderFetchError as e:
                errors.append(str(e))
                logger.warning("%s failed for %s: %s", provider.name, sym, e.message)
                continue
            except Exception as e:  # pylint: disable=broad-except
                errors.append(f"{provider.name}: {e}")
                logger.warning("%s raised unexpectedly for %s", provider.name, sym, exc_info=True)
                continue
            await self._record(sym, PriceCheckStatus.SUCCESS, quote=quote)
            if errors:
                logger.info("Got %s price from %s: $%s", sym, quote.source, quote.price)
            return quote

        error = NoPriceAvailable(sym, errors)
        await self._record(sym, PriceCheckStatus.FAILED, error_message=str(error))
        raise error

    async def _record(
        self,
        symbol: str,
        status: PriceCheckStatus,
        *,
        quote: Quote | None = None,
        error_message: str | None = None,
    ) -> None:
        try:
            await asyncio.to_thread(
                self._repository.log_price_check,
                symbol,
                status,
                price=quote.price if quote else None,
                source=quote.source if quote else None,
                error_message=error_message,
            )
        except PersistenceError as e:
            logger.error("Failed to log price check for %s: %s", symbol, e)

    async def close(self) -> None:
        """Close every provider."""
        for provider in self._providers:
            try:
                await provider.close()
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("Error closing provider %s: %s", type(provider).__name__, exc)
