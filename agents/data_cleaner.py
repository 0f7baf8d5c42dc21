"""CSV data cleaning agent."""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from agents.base import GROQ_MODEL, BaseAgent
from core.config import ModelConfig, config
from tools.csv_profile import clean_dataframe, load_csv, profile_dataframe
from tools.section_parser import Section, SectionParser
from tools.text_input import looks_like_file

PLAN_SECTIONS = SectionParser([
    Section("missing_values_strategy", ("missing value",), kind="list", min_item_length=5),
    Section("duplicate_handling", ("duplicate",), kind="list", min_item_length=5),
    Section("data_type_corrections", ("data type",), kind="list", min_item_length=5),
    Section("outlier_treatment", ("outlier",), kind="list", min_item_length=5),
    Section("format_standardization", ("format", "standardization"), kind="list", min_item_length=5),
    Section("validation_rules", ("validation",), kind="list", min_item_length=5),
])


class CleaningPlan(BaseModel):
    missing_values_strategy: List[str] = Field(default_factory=list)
    duplicate_handling: List[str] = Field(default_factory=list)
    data_type_corrections: List[str] = Field(default_factory=list)
    outlier_treatment: List[str] = Field(default_factory=list)
    format_standardization: List[str] = Field(default_factory=list)
    validation_rules: List[str] = Field(default_factory=list)


def parse_cleaning_plan(response: str) -> CleaningPlan:
    return CleaningPlan(**PLAN_SECTIONS.parse(response).as_dict())


def cleaned_path(source: str) -> Path:
    if looks_like_file(source):
        path = Path(source)
        return path.with_name(f"{path.stem}_cleaned.csv")
    return Path(config.agents.output_dir) / f"dataset_{datetime.now():%Y%m%d%H%M%S}_cleaned.csv"


class DataCleanerAgent(BaseAgent):
    """Profiles a CSV, asks for a cleaning plan, and writes a cleaned copy."""

    slug = "data_cleaner"
    name = "Data Cleaner"
    description = "Profile a CSV dataset, plan the cleaning and write a cleaned copy"
    model = ModelConfig(provider="groq", model_name=GROQ_MODEL, temperature=0.2, max_tokens=1200)
    failure_context = "Dataset cleaning failed"
    payload_keys = ("cleaned_data",)
    required_fields = {"csv_file": "CSV file path is required"}

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        source = input_data["csv_file"]
        options = input_data.get("cleaning_options") or {}

        df = load_csv(source)
        analysis = profile_dataframe(df)

        response = await self.complete(
            "data_cleaner",
            analysis=json.dumps(analysis, indent=2, default=str),
            options=json.dumps(options, indent=2),
        )
        plan = parse_cleaning_plan(response)

        cleaned, summary = clean_dataframe(df, analysis["data_types"])
        output_path = cleaned_path(source)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        cleaned.to_csv(output_path, index=False)

        return {
            "cleaned_data": {
                "summary": summary,
                "cleaned_csv_path": str(output_path),
                "cleaning_report": (
                    f"Cleaned dataset with {len(summary['operations_performed'])} operations"
                ),
                "original_analysis": analysis,
                "cleaning_plan": plan.model_dump(),
                "cleaned_data_preview": cleaned.head(5).astype(str).to_dict(orient="records"),
            },
            "file_name": Path(source).name if looks_like_file(source) else "inline.csv",
            "cleaning_summary": summary,
            "cleaned_at": datetime.now().isoformat(),
            "rows_processed": summary["rows_processed"],
            "issues_fixed": summary["issues_fixed"],
        }
