"""Finnhub quote provider (fallback source)."""
from datetime import datetime, timezone

import httpx
from pydantic import ValidationError

from stock_alert_monitor.exceptions import ProviderFetchError
from stock_alert_monitor.providers.core import (QuoteProviderABC,
                                                normalize_stock_symbol,
                                                parse_price)
from stock_alert_monitor.providers.stocks.finnhub.models import (
    FinnhubQuoteParams, FinnhubQuoteResponse)
from stock_alert_monitor.schemas import Quote


class FinnhubProvider(QuoteProviderABC):
    """Quote provider for stocks via the Finnhub REST API.

    Requires an API key (free tier is enough for /quote). Uses httpx for
    REST calls; the client timeout bounds every lookup.
    """

    name = "finnhub"
    BASE_URL = "https://finnhub.io/api/v1"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Finnhub provider.

        Args:
            api_key: Finnhub API token.
            base_url: Override of the API root (defaults to BASE_URL).
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url or self.BASE_URL,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def get_quote(self, symbol: str) -> Quote:
        """Fetch the current quote for a stock symbol.

        Args:
            symbol: Stock ticker (e.g., "AAPL").

        Returns:
            Quote with the current price (Finnhub field ``c``).
        """
        sym = normalize_stock_symbol(symbol)
        params = FinnhubQuoteParams(symbol=sym, token=self._api_key).model_dump()
        try:
            response = await self._client.get("/quote", params=params)
            response.raise_for_status()
            data = FinnhubQuoteResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            raise ProviderFetchError(
                self.name, sym, f"HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            raise ProviderFetchError(self.name, sym, str(e) or type(e).__name__) from e

        price = parse_price(data.current)
        if price is None:
            raise ProviderFetchError(self.name, sym, f"Stock '{sym}' not found or has no price data")
        return Quote(
            symbol=sym,
            price=price,
            source=self.name,
            timestamp=self._parse_timestamp(data.timestamp),
        )

    @staticmethod
    def _parse_timestamp(ts: int | None) -> datetime:
        if ts:
            return datetime.fromtimestamp(ts, tz=timezone.utc)
        return datetime.now(timezone.utc)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
