"""Regular trading session of the exchange (NYSE/Nasdaq hours, no holidays)."""
from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo

EXCHANGE_TZ = ZoneInfo("America/New_York")
MARKET_OPEN = time(9, 30)
MARKET_CLOSE = time(16, 0)


def to_exchange_time(moment: datetime) -> datetime:
    """Convert an instant to exchange civil time; naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(EXCHANGE_TZ)


def is_market_open(now: datetime | None = None) -> bool:
    """Return True on weekdays between 09:30 and 16:00 exchange time, both inclusive.

    The time of day is compared at minute resolution, so 16:00:45 still counts
    as open.
    """
    local = to_exchange_time(now or datetime.now(timezone.utc))
    if local.weekday() >= 5:
        return False
    minute_of_day = time(local.hour, local.minute)
    return MARKET_OPEN <= minute_of_day <= MARKET_CLOSE
