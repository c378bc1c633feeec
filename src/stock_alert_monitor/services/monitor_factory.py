"""Factory wiring providers, repository and notifier into a PriceMonitor."""
import logging

from sqlalchemy.engine import Engine

from stock_alert_monitor.config import Settings
from stock_alert_monitor.notifications import EmailNotifier, SmtpTransport
from stock_alert_monitor.providers import FinnhubProvider, YFinanceProvider
from stock_alert_monitor.repositories import AlertRepository
from stock_alert_monitor.services.monitor import PriceMonitor
from stock_alert_monitor.services.quote_service import QuoteService

logger = logging.getLogger(__name__)


def create_quote_service(settings: Settings, repository: AlertRepository) -> QuoteService:
    """Yahoo Finance as primary; Finnhub as fallback only when an API key is configured."""
    secondary = None
    if settings.finnhub_api_key:
        secondary = FinnhubProvider(
            settings.finnhub_api_key,
            base_url=settings.finnhub_base_url,
            timeout=settings.provider_timeout_seconds,
        )
    else:
        logger.info("FINNHUB_API_KEY not set; running without a fallback quote provider")
    primary = YFinanceProvider(max_workers=settings.batch_size)
    return QuoteService(primary, secondary, repository)


def create_notifier(settings: Settings) -> EmailNotifier:
    transport = SmtpTransport(
        settings.smtp_host,
        settings.smtp_port,
        username=settings.smtp_user,
        password=settings.smtp_pass,
        use_ssl=settings.smtp_use_ssl,
    )
    return EmailNotifier(
        transport,
        settings.email_from,
        max_attempts=settings.email_max_attempts,
        retry_delay=settings.email_retry_delay_seconds,
    )


def create_price_monitor(settings: Settings, engine: Engine) -> PriceMonitor:
    """Create a PriceMonitor from settings.

    Args:
        settings: Application settings (credentials, batch and retry tuning).
        engine: Engine bound to the alert datastore.

    Returns:
        A configured PriceMonitor instance.
    """
    repository = AlertRepository(engine)
    return PriceMonitor(
        repository,
        create_quote_service(settings, repository),
        create_notifier(settings),
        batch_size=settings.batch_size,
        batch_delay=settings.batch_delay_seconds,
    )
