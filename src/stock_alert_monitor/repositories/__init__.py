"""Datastore access for the monitor."""
from stock_alert_monitor.repositories.alerts import AlertRepository

__all__ = ["AlertRepository"]
