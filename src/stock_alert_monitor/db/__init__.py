"""Database package: models and session management."""
from stock_alert_monitor.db.models import (Alert, AlertType, EmailLog,
                                           EmailStatus, PriceCheckLog,
                                           PriceCheckStatus, User)

__all__ = [
    "Alert",
    "AlertType",
    "EmailLog",
    "EmailStatus",
    "PriceCheckLog",
    "PriceCheckStatus",
    "User",
]
