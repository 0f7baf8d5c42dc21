"""Crypto sentiment agent."""
import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agents.base import BaseAgent
from core.config import ModelConfig
from core.exceptions import ServiceError
from core.llm import LLMClient
from tools.market_data import BinanceMarketData, MarketDataProvider, MarketSnapshot
from tools.section_parser import Section, SectionParser, find_labeled_value

logger = logging.getLogger(__name__)

SCORE_RE = re.compile(r"-?\d+")
LABELS = ("bullish", "bearish", "neutral")
QUOTE_ASSET = "USDT"

SENTIMENT_SECTIONS = SectionParser([
    Section("drivers", ("driver", "positive factor", "catalyst"), kind="list"),
    Section("risks", ("risk",), kind="list"),
    Section("summary", ("summary",)),
])


class Sentiment(BaseModel):
    score: int = 0
    label: str = "Neutral"
    drivers: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    summary: str = ""


def label_for_score(score: int) -> str:
    if score >= 20:
        return "Bullish"
    if score <= -20:
        return "Bearish"
    return "Neutral"


def parse_sentiment(response: str) -> Sentiment:
    """Score clamped to [-100, 100]; the label follows the score when the model gives none."""
    score_text = find_labeled_value(response, "sentiment score", "score") or ""
    match = SCORE_RE.search(score_text)
    score = max(-100, min(100, int(match.group()))) if match else 0

    label_text = (find_labeled_value(response, "label", "overall sentiment") or "").lower()
    label = next((candidate.capitalize() for candidate in LABELS if candidate in label_text), label_for_score(score))

    parsed = SENTIMENT_SECTIONS.parse(response)
    return Sentiment(
        score=score,
        label=label,
        drivers=parsed.items("drivers"),
        risks=parsed.items("risks"),
        summary=parsed.text("summary", default=f"Overall sentiment is {label.lower()}."),
    )


def market_context(snapshot: Optional[MarketSnapshot]) -> str:
    if snapshot is None:
        return "No live market data is available; rely on general knowledge and say so."
    return (
        f"Live market data ({snapshot.source}): price ${snapshot.current_price:,.4f}, "
        f"24h change {snapshot.change_percent_24h:+.2f}%, 24h volume {snapshot.volume_24h:,.0f}, "
        f"24h range ${snapshot.low_24h:,.4f} - ${snapshot.high_24h:,.4f}."
    )


class CryptoSentimentAgent(BaseAgent):
    """Market data is context only; when it cannot be fetched the analysis runs without it."""

    slug = "crypto_sentiment_agent"
    name = "Crypto Sentiment Scout"
    description = "Score current market sentiment for a cryptocurrency"
    model = ModelConfig(provider="openai", model_name="gpt-4o-mini", temperature=0.3, max_tokens=800)
    failure_context = "Failed to analyze crypto sentiment"
    payload_keys = ("sentiment",)
    required_fields = {"coin_symbol": "Please provide a cryptocurrency symbol (e.g., BTC, ETH, SOL)"}

    def __init__(self, llm: Optional[LLMClient] = None, market_data: Optional[MarketDataProvider] = None):
        super().__init__(llm)
        self.market_data = market_data or BinanceMarketData(interval="1h", limit=24)

    async def fetch_snapshot(self, symbol: str) -> Optional[MarketSnapshot]:
        pair = symbol if symbol.endswith(QUOTE_ASSET) else f"{symbol}{QUOTE_ASSET}"
        try:
            return await self.market_data.snapshot(pair)
        except ServiceError as e:
            logger.warning("No market data for %s: %s", pair, e)
            return None

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        symbol = str(input_data["coin_symbol"]).strip().upper()
        snapshot = await self.fetch_snapshot(symbol)

        response = await self.complete("crypto_sentiment", coin_symbol=symbol, market_context=market_context(snapshot))
        return {
            "coin_symbol": symbol,
            "sentiment": parse_sentiment(response).model_dump(),
            "market_data": snapshot.model_dump(exclude={"price_history"}) if snapshot else None,
            "analyzed_at": datetime.now().isoformat(),
        }
