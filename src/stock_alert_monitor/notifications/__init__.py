"""Outbound alert notifications."""
from stock_alert_monitor.notifications.notifier import (EmailNotifier,
                                                        EmailTransport,
                                                        SmtpTransport)

__all__ = ["EmailNotifier", "EmailTransport", "SmtpTransport"]
