"""Stock quote providers."""
from stock_alert_monitor.providers.stocks.finnhub.finnhub_provider import \
    FinnhubProvider
from stock_alert_monitor.providers.stocks.yfinance.y_finance_provider import \
    YFinanceProvider

__all__ = ["FinnhubProvider", "YFinanceProvider"]
