"""API routers.

Includes routes for:
- /api/health - liveness and market status
- /api/cron - run one price-check cycle now
"""
from stock_alert_monitor.routers.monitor import router as monitor_router

__all__ = ["monitor_router"]
