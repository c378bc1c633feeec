"""Shared utilities for quote providers."""
from decimal import Decimal, InvalidOperation


def normalize_stock_symbol(symbol: str) -> str:
    """Normalize a stock symbol (trimmed, uppercase)."""
    return symbol.strip().upper()


def parse_price(raw: object) -> Decimal | None:
    """Convert a provider price to Decimal; None when missing, unparsable or not positive.

    Floats go through ``str`` so 187.32 stays 187.32 rather than its binary expansion.
    """
    if raw is None or isinstance(raw, bool):
        return None
    try:
        price = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite() or price <= 0:
        return None
    return price
