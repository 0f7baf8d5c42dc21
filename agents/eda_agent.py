"""Exploratory data analysis agent."""
import json
from datetime import datetime
from typing import Any, Dict, List

from agents.base import BaseAgent, require_any
from core.config import ModelConfig
from core.exceptions import AgentInputError
from tools.csv_profile import load_csv, profile_dataframe, top_correlations
from tools.section_parser import NUMBERED_RE, parse_list_items

MAX_INSIGHTS = 5


def parse_insights(response: str) -> List[str]:
    """Numbered insights first; bullets when the model ignored the numbering."""
    numbered = [line for line in response.splitlines() if NUMBERED_RE.match(line.strip())]
    items = parse_list_items("\n".join(numbered)) or parse_list_items(response, min_length=10)
    return items[:MAX_INSIGHTS]


def column_summaries(profile: Dict[str, Any], df) -> Dict[str, Dict[str, Any]]:
    """Per-column stats in the numeric/categorical/empty shape."""
    summaries = {}
    for column in profile["columns"]:
        kind = profile["data_types"][column]
        missing = profile["missing_values"][column]
        if kind == "unknown":
            summaries[column] = {"type": "empty", "count": 0}
        elif kind == "numeric" and column in profile["statistics"]:
            summaries[column] = {"type": "numeric", "missing": missing, **profile["statistics"][column]}
        else:
            values = df[column][df[column].str.strip() != ""]
            counts = values.value_counts()
            summaries[column] = {
                "type": "categorical" if kind == "text" else kind,
                "count": int(values.count()),
                "unique": int(values.nunique()),
                "most_common": [counts.index[0], int(counts.iloc[0])] if not counts.empty else None,
                "missing": missing,
            }
    return summaries


def generate_recommendations(summaries: Dict[str, Dict[str, Any]]) -> List[str]:
    recommendations = []
    with_missing = [column for column, stats in summaries.items() if stats.get("missing", 0) > 0]
    if with_missing:
        recommendations.append(f"Handle missing data in columns: {', '.join(with_missing)}")
    numeric = [column for column, stats in summaries.items() if stats["type"] == "numeric"]
    if len(numeric) >= 2:
        recommendations.append("Consider correlation analysis between numeric variables")
    recommendations.append("Create visualizations to better understand data distributions")
    recommendations.append("Consider feature engineering for better model performance")
    return recommendations


class EDAAgent(BaseAgent):
    """Profiles a CSV with pandas and asks Gemini for business insights."""

    slug = "eda_agent"
    name = "EDA Agent"
    description = "Exploratory data analysis of a CSV with AI-generated insights"
    model = ModelConfig(provider="gemini", model_name="gemini-2.5-flash", temperature=0.3, max_tokens=1500)
    failure_context = "EDA analysis failed"
    payload_keys = ("analysis",)

    def validate(self, input_data: Dict[str, Any]) -> None:
        require_any(input_data, ("csv_upload", "csv_file"), "CSV file path is required")

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        _, source = require_any(input_data, ("csv_upload", "csv_file"), "CSV file path is required")
        df = load_csv(source)
        if df.empty:
            raise AgentInputError("CSV file is empty or could not be parsed")

        profile = profile_dataframe(df)
        summaries = column_summaries(profile, df)
        correlations = top_correlations(df, profile["data_types"])

        response = await self.complete(
            "eda_agent",
            statistics=json.dumps(summaries, indent=2, default=str),
            correlations=json.dumps(correlations, indent=2) if correlations else "None",
            preview=json.dumps(profile["sample_rows"], indent=2, default=str),
        )

        return {
            "analysis": {
                "basic_stats": summaries,
                "insights": parse_insights(response),
                "correlations": correlations,
                "data_preview": profile["sample_rows"],
                "recommendations": generate_recommendations(summaries),
            },
            "rowCount": profile["row_count"],
            "columnCount": profile["column_count"],
            "processed_at": datetime.now().isoformat(),
        }
