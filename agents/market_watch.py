"""Market watch agent: live candles, local indicators, LLM trading read."""
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent
from core.config import ModelConfig
from core.llm import LLMClient
from tools.indicators import compute_indicators
from tools.market_data import BinanceMarketData, MarketDataProvider
from tools.section_parser import strip_bullet, strip_heading, strip_markdown


class MarketAnalysis(BaseModel):
    sentiment: str = "neutral"
    signals: List[str] = Field(default_factory=list)
    risk_level: str = "medium"
    support_resistance: str = "N/A"
    outlook: str = ""


def _clean(line: str) -> str:
    return strip_markdown(strip_bullet(line) or strip_heading(line))


def parse_market_analysis(response: str) -> MarketAnalysis:
    """Classify each line by its keywords; unparsed fields stay neutral."""
    analysis = MarketAnalysis()
    for raw in response.splitlines():
        line = _clean(raw)
        lowered = line.lower()
        if not line or line.endswith(":"):
            continue
        if "sentiment" in lowered:
            mood = re.search(r"\b(bullish|bearish|neutral)\b", lowered)
            if mood:
                analysis.sentiment = mood.group(1)
        elif "signal" in lowered or re.search(r"\b(buy|sell|hold)\b", lowered):
            analysis.signals.append(line)
        elif "risk" in lowered:
            level = re.search(r"\b(low|medium|high)\b", lowered)
            if level:
                analysis.risk_level = level.group(1)
        elif "support" in lowered or "resistance" in lowered:
            analysis.support_resistance = line
        elif "outlook" in lowered:
            analysis.outlook = line
    if not analysis.outlook:
        analysis.outlook = "Market analysis unavailable"
    return analysis


def _fmt(value: Optional[float], prefix: str = "") -> str:
    return f"{prefix}{value:.2f}" if value is not None else "N/A"


class MarketWatchAgent(BaseAgent):
    """Fetches candles for a symbol, computes indicators and asks for a trading read."""

    slug = "market_watch"
    name = "Market Watch"
    description = "Live market data, technical indicators and trading signals for a symbol"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.3, max_tokens=600)
    failure_context = "Market analysis failed"
    payload_keys = ("market_data", "analysis")
    required_fields = {"symbol": "Trading symbol is required (e.g., BTCUSDT, AAPL)"}

    def __init__(self, llm: Optional[LLMClient] = None, market_data: Optional[MarketDataProvider] = None):
        super().__init__(llm)
        self.market_data = market_data or BinanceMarketData()

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        symbol = str(input_data["symbol"]).strip().upper()

        snapshot = await self.market_data.snapshot(symbol)
        indicators = compute_indicators(snapshot.closes, snapshot.volumes)
        macd = indicators["macd"]

        response = await self.complete(
            "market_watch",
            symbol=symbol,
            price=f"{snapshot.current_price:.2f}",
            change_percent=f"{snapshot.change_percent_24h:.2f}",
            rsi=_fmt(indicators["rsi"]),
            sma_20=_fmt(indicators["sma_20"], "$"),
            sma_50=_fmt(indicators["sma_50"], "$"),
            macd=_fmt(macd["macd"]) if macd else "N/A",
        )

        market_data = snapshot.model_dump()
        market_data["indicators"] = indicators
        return {
            "symbol": symbol,
            "market_data": market_data,
            "analysis": parse_market_analysis(response).model_dump(),
            "last_updated": datetime.now().isoformat(),
        }
