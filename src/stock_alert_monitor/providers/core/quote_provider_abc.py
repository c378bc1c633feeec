"""Abstract base class for quote providers."""
from abc import ABC, abstractmethod

from stock_alert_monitor.schemas import Quote


class QuoteProviderABC(ABC):
    """Base interface for all price-quote providers.

    Each provider fetches the current price for a ticker and returns a Quote
    tagged with its ``name``. Any failure is raised as ProviderFetchError so
    callers can fall back to another provider.
    """

    name: str = "provider"

    @abstractmethod
    async def get_quote(self, symbol: str) -> Quote:
        """Fetch the current quote for a symbol.

        Args:
            symbol: Stock ticker (e.g., "AAPL").

        Returns:
            A Quote with a strictly positive price.

        Raises:
            ProviderFetchError: on network errors, malformed responses,
                unknown symbols, or non-positive prices.
        """

    async def close(self) -> None:
        """Clean up resources (connections, clients).

        Override in subclasses if cleanup is needed.
        """

    async def __aenter__(self) -> "QuoteProviderABC":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        """Async context manager exit - calls close()."""
        await self.close()
