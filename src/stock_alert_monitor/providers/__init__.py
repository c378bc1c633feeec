"""Quote providers for stock prices.

This module provides a unified interface (QuoteProviderABC) for fetching
the current price of a ticker from interchangeable sources:

- YFinanceProvider: Yahoo Finance via yfinance (primary, no key required)
- FinnhubProvider: Finnhub REST API (fallback, needs FINNHUB_API_KEY)

All providers return the same Quote shape tagged with the provider name
and raise ProviderFetchError on any failure.

Example:
    async with FinnhubProvider(api_key="...") as provider:
        quote = await provider.get_quote("AAPL")
        print(f"{quote.symbol}: ${quote.price} ({quote.source})")
"""
from stock_alert_monitor.providers.core import QuoteProviderABC
from stock_alert_monitor.providers.stocks import (FinnhubProvider,
                                                  YFinanceProvider)

__all__ = [
    "QuoteProviderABC",
    "FinnhubProvider",
    "YFinanceProvider",
]
