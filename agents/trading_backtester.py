"""Trading strategy backtester."""
from typing import Any, Dict, List, Optional

import pandas as pd

from agents.base import ReportAgent, is_blank
from core.config import ModelConfig
from core.exceptions import AgentInputError
from tools.csv_profile import find_column, load_csv, to_numbers
from tools.section_parser import Section, SectionParser
from tools.text_input import read_text_input

MAX_ROWS = 500

BACKTEST_SECTIONS = SectionParser([
    Section("observations", ("observation", "detailed", "analysis"), kind="list"),
    Section("overview", ("overview", "performance", "metric"), kind="list"),
    Section("recommendations", ("recommendation", "improvement"), kind="list"),
])


def parse_metric_items(items: List[str]) -> Dict[str, str]:
    metrics = {}
    for item in items:
        name, sep, value = item.partition(":")
        if sep and name.strip() and value.strip():
            metrics[name.strip()] = value.strip()
    return metrics


def price_summary(df: pd.DataFrame) -> Optional[Dict[str, Any]]:
    """Buy-and-hold benchmark over the close column, when there is one."""
    close_column = find_column(df, ["close", "adj close", "price"])
    if close_column is None:
        return None
    closes = to_numbers(df[close_column]).dropna()
    if len(closes) < 2 or closes.iloc[0] == 0:
        return None
    date_column = find_column(df, ["date", "timestamp", "time"])
    summary = {
        "rows": int(len(df)),
        "first_close": round(float(closes.iloc[0]), 4),
        "last_close": round(float(closes.iloc[-1]), 4),
        "buy_and_hold_return_pct": round(float((closes.iloc[-1] / closes.iloc[0] - 1) * 100), 2),
    }
    if date_column is not None:
        summary["start"] = str(df[date_column].iloc[0])
        summary["end"] = str(df[date_column].iloc[-1])
    return summary


def tail_rows(csv_text: str, limit: int = MAX_ROWS) -> str:
    """Header plus the last `limit` data rows."""
    lines = [line for line in csv_text.strip().splitlines() if line.strip()]
    if len(lines) <= limit + 1:
        return "\n".join(lines)
    return "\n".join([lines[0]] + lines[-limit:])


def parse_backtest(response: str) -> Dict[str, Any]:
    parsed = BACKTEST_SECTIONS.parse(response)
    return {
        "metrics": parse_metric_items(parsed.items("overview")),
        "observations": parsed.items("observations"),
        "recommendations": parsed.items("recommendations"),
    }


class TradingBacktesterAgent(ReportAgent):
    """The simulation is the model's; the buy-and-hold benchmark is computed here."""

    slug = "trading_backtester"
    name = "Trading Strategy Backtester"
    description = "Backtest a trading strategy against historical OHLCV data"
    model = ModelConfig(provider="gemini", model_name="gemini-1.5-flash", temperature=0.2, max_tokens=3000)
    failure_context = "Failed to backtest strategy"
    prompt_name = "trading_backtester"

    def validate(self, input_data: Dict[str, Any]) -> None:
        if is_blank(input_data.get("strategy_logic")) or is_blank(input_data.get("csv_data")):
            raise AgentInputError("Please provide both strategy logic and CSV data")

    def prepare(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        csv_text, _ = read_text_input(input_data["csv_data"])
        return {
            "strategy_logic": str(input_data["strategy_logic"]).strip(),
            "csv_text": csv_text,
            "benchmark": price_summary(load_csv(csv_text)),
        }

    def prompt_variables(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return {"strategy_logic": context["strategy_logic"], "csv_data": tail_rows(context["csv_text"])}

    def parse_sections(self, response: str, context: Dict[str, Any]) -> Dict[str, Any]:
        return {**parse_backtest(response), "benchmark": context["benchmark"]}
