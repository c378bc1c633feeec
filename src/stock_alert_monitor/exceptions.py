"""Error types raised across the monitor's collaborators."""


class StockAlertError(Exception):
    """Base class for all monitor errors."""


class ProviderFetchError(StockAlertError):
    """A single quote provider failed to produce a usable price."""

    def __init__(self, provider: str, symbol: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.symbol = symbol
        self.message = message


class NoPriceAvailable(StockAlertError):
    """Every configured provider failed for a symbol."""

    def __init__(self, symbol: str, errors: list[str]) -> None:
        detail = "; ".join(errors) if errors else "no quote providers configured"
        super().__init__(f"No price available for '{symbol}': {detail}")
        self.symbol = symbol
        self.errors = errors


class SendError(StockAlertError):
    """Email delivery failed after exhausting all attempts."""

    def __init__(self, recipient: str, attempts: int, message: str) -> None:
        super().__init__(message)
        self.recipient = recipient
        self.attempts = attempts


class PersistenceError(StockAlertError):
    """A datastore read or write failed."""
