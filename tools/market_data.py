"""Market data providers."""
import logging
from datetime import datetime, timezone
from typing import List, Protocol

import aiohttp
from pydantic import BaseModel, Field

from core.exceptions import ServiceError

logger = logging.getLogger(__name__)

BINANCE_KLINES_URL = "https://api.binance.com/api/v3/klines"


class Candle(BaseModel):
    timestamp: str
    open: float
    high: float
    low: float
    close: float
    volume: float


class MarketSnapshot(BaseModel):
    symbol: str
    current_price: float
    previous_price: float
    change_24h: float
    change_percent_24h: float
    volume_24h: float
    high_24h: float
    low_24h: float
    price_history: List[Candle] = Field(default_factory=list)
    source: str

    @property
    def closes(self) -> List[float]:
        return [candle.close for candle in self.price_history]

    @property
    def volumes(self) -> List[float]:
        return [candle.volume for candle in self.price_history]


def summarize_candles(symbol: str, candles: List[Candle], source: str, window: int = 24) -> MarketSnapshot:
    """Build a snapshot; the 24h figures cover the last `window` candles."""
    if len(candles) < 2:
        raise ServiceError(f"Not enough market data for {symbol}")
    recent = candles[-window:]
    first, latest = recent[0], recent[-1]
    return MarketSnapshot(
        symbol=symbol,
        current_price=latest.close,
        previous_price=first.open,
        change_24h=latest.close - first.open,
        change_percent_24h=(latest.close - first.open) / first.open * 100 if first.open else 0.0,
        volume_24h=sum(candle.volume for candle in recent),
        high_24h=max(candle.high for candle in recent),
        low_24h=min(candle.low for candle in recent),
        price_history=candles,
        source=source,
    )


class MarketDataProvider(Protocol):
    async def snapshot(self, symbol: str) -> MarketSnapshot:
        ...


class BinanceMarketData:
    """Hourly candles from the public Binance klines endpoint."""

    def __init__(self, interval: str = "1h", limit: int = 60, base_url: str = BINANCE_KLINES_URL,
                 timeout: float = 15):
        self.interval = interval
        self.limit = limit
        self.base_url = base_url
        self.timeout = timeout

    async def fetch_candles(self, symbol: str) -> List[Candle]:
        params = {"symbol": symbol.upper(), "interval": self.interval, "limit": self.limit}
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.get(self.base_url, params=params) as response:
                    if response.status != 200:
                        detail = await response.text()
                        raise ServiceError(f"Market data request failed ({response.status}): {detail[:200]}")
                    rows = await response.json()
        except aiohttp.ClientError as e:
            raise ServiceError(f"Market data request failed: {e}") from e

        return [
            Candle(
                timestamp=datetime.fromtimestamp(row[0] / 1000, tz=timezone.utc).isoformat(),
                open=float(row[1]),
                high=float(row[2]),
                low=float(row[3]),
                close=float(row[4]),
                volume=float(row[5]),
            )
            for row in rows
        ]

    async def snapshot(self, symbol: str) -> MarketSnapshot:
        candles = await self.fetch_candles(symbol)
        logger.debug("Fetched %d candles for %s", len(candles), symbol)
        return summarize_candles(symbol.upper(), candles, source="Binance")

