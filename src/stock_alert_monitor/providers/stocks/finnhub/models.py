"""Models for the Finnhub provider (API params and quote payload)."""
from pydantic import BaseModel, Field


class FinnhubQuoteParams(BaseModel):
    """Query params for /quote."""

    symbol: str
    token: str


class FinnhubQuoteResponse(BaseModel):
    """Body of /quote. Unknown symbols come back with every field set to 0."""

    current: float | None = Field(default=None, alias="c")
    previous_close: float | None = Field(default=None, alias="pc")
    change: float | None = Field(default=None, alias="d")
    change_percent: float | None = Field(default=None, alias="dp")
    high: float | None = Field(default=None, alias="h")
    low: float | None = Field(default=None, alias="l")
    open: float | None = Field(default=None, alias="o")
    timestamp: int | None = Field(default=None, alias="t")

    model_config = {"populate_by_name": True}
