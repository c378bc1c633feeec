"""Service layer: quote lookup with fallback and the monitor cycle."""
from stock_alert_monitor.services.monitor import PriceMonitor, should_trigger
from stock_alert_monitor.services.quote_service import QuoteService

__all__ = [
    "PriceMonitor",
    "QuoteService",
    "should_trigger",
]
