"""Yahoo Finance quote provider (primary source)."""
import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from decimal import Decimal

import yfinance as yf

from stock_alert_monitor.exceptions import ProviderFetchError
from stock_alert_monitor.providers.core import (QuoteProviderABC,
                                                normalize_stock_symbol,
                                                parse_price)
from stock_alert_monitor.schemas import Quote


class YFinanceProvider(QuoteProviderABC):
    """Quote provider for stocks via Yahoo Finance.

    Uses the yfinance library; no API key required. yfinance is blocking,
    so each lookup runs on a dedicated thread pool.
    """

    name = "yahoo"

    def __init__(self, max_workers: int = 10) -> None:
        """Initialize the provider.

        Args:
            max_workers: Threads for blocking yfinance calls; match the fetch
                batch size so a whole batch is in flight at once.
        """
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers), thread_name_prefix="yfinance"
        )

    def _extract_price(self, ticker: yf.Ticker, symbol: str) -> Decimal:
        """Read the last price from fast_info, falling back to the full info dict."""
        info = getattr(ticker, "fast_info", None)
        if info is not None and (price := parse_price(info.get("lastPrice") or info.get("regularMarketPrice"))):
            return price
        full = ticker.info or {}
        price = parse_price(full.get("currentPrice") or full.get("regularMarketPrice"))
        if price is None:
            raise ValueError(f"Stock '{symbol}' not found or has no price data")
        return price

    def _fetch_quote_sync(self, symbol: str) -> Quote:
        """Fetch a single quote synchronously (run in thread)."""
        try:
            price = self._extract_price(yf.Ticker(symbol), symbol)
        except Exception as e:
            raise ProviderFetchError(self.name, symbol, str(e)) from e
        return Quote(
            symbol=symbol,
            price=price,
            source=self.name,
            timestamp=datetime.now(timezone.utc),
        )

    async def get_quote(self, symbol: str) -> Quote:
        """Fetch the current quote for a stock symbol."""
        sym = normalize_stock_symbol(symbol)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._fetch_quote_sync, sym)

    async def close(self) -> None:
        """Release the worker threads."""
        self._executor.shutdown(wait=False, cancel_futures=True)
