"""Core provider abstractions."""
from stock_alert_monitor.providers.core.quote_provider_abc import QuoteProviderABC
from stock_alert_monitor.providers.core.utils import (normalize_stock_symbol,
                                                      parse_price)

__all__ = [
    "QuoteProviderABC",
    "normalize_stock_symbol",
    "parse_price",
]
