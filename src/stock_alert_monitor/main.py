"""Main module for the stock alert monitor service."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI

from stock_alert_monitor.config import Settings, get_settings
from stock_alert_monitor.db.sessions import create_db_engine, init_db
from stock_alert_monitor.jobs import CycleTrigger
from stock_alert_monitor.logging_config import setup_logging
from stock_alert_monitor.market_calendar import is_market_open
from stock_alert_monitor.routers import monitor_router
from stock_alert_monitor.services.monitor_factory import create_price_monitor

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """Create the datastore schema and monitor at startup; start the cycle trigger."""
    settings: Settings = fastapi_app.state.settings
    engine = create_db_engine(settings.database_url, echo=settings.sql_echo)
    # Startup fails loudly if the datastore is unreachable
    init_db(engine)

    monitor = create_price_monitor(settings, engine)
    trigger = CycleTrigger(
        monitor,
        interval_minutes=settings.check_interval_minutes,
        startup_delay=settings.startup_delay_seconds,
    )
    fastapi_app.state.monitor = monitor
    if settings.scheduler_enabled:
        trigger.start()
    else:
        logger.info("Scheduler disabled; cycles run only via /api/cron")

    yield

    trigger.shutdown()
    await monitor.close()
    engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application; settings default to the environment."""
    fastapi_app = FastAPI(
        title="Stock Alert Monitor",
        description="Price-threshold alerts for stocks, delivered by email",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.settings = settings or get_settings()
    fastapi_app.include_router(monitor_router)

    @fastapi_app.get("/")
    def root():
        """Return health check status."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "market_open": is_market_open(),
        }

    return fastapi_app


app = create_app()


def run():
    """Run the server (uvicorn). Use for `stock-alert-monitor`."""
    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        "stock_alert_monitor.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
