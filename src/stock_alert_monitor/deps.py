"""FastAPI dependency injection: app.state holds singletons; Depends() resolves them.

No external DI container. Lifespan (main.py) creates the monitor once and
attaches it to app.state; these getters are used by Depends().
"""
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request

from stock_alert_monitor.config import Settings
from stock_alert_monitor.services import PriceMonitor


def get_monitor(request: Request) -> PriceMonitor:
    """Resolve the PriceMonitor from app.state (created at startup)."""
    return request.app.state.monitor


def get_app_settings(request: Request) -> Settings:
    """Resolve the Settings the app was started with."""
    return request.app.state.settings


def require_cron_secret(
    settings: Annotated[Settings, Depends(get_app_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Reject the request unless it carries ``Bearer <CRON_SECRET>`` (when a secret is set)."""
    if settings.cron_secret and authorization != f"Bearer {settings.cron_secret}":
        raise HTTPException(status_code=401, detail="Invalid cron authorization")


# Type aliases for route injection
MonitorDep = Annotated[PriceMonitor, Depends(get_monitor)]
