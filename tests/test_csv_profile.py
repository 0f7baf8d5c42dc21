"""Tests for CSV profiling, cleaning and billing aggregation."""
import math

import pandas as pd
import pytest

from core.exceptions import AgentInputError
from tools.billing import summarize_billing
from tools.csv_profile import (
    clean_dataframe,
    find_column,
    infer_column_type,
    load_csv,
    profile_dataframe,
    to_numbers,
    top_correlations,
)

SALES = "region,units,price\nNorth,10,2.5\nSouth,20,5.0\nNorth,30,7.5\n"


def test_load_csv_from_text_and_file(tmp_path) -> None:
    path = tmp_path / "sales.csv"
    path.write_text(SALES)
    for source in (SALES, str(path)):
        df = load_csv(source)
        assert list(df.columns) == ["region", "units", "price"]
        assert df["units"].tolist() == ["10", "20", "30"]


def test_infer_column_type() -> None:
    assert infer_column_type(pd.Series(["1", "2.5", ""])) == "numeric"
    assert infer_column_type(pd.Series(["2024-01-01", "2024-02-01"])) == "date"
    assert infer_column_type(pd.Series(["red", "blue"])) == "text"
    assert infer_column_type(pd.Series(["", " "])) == "unknown"


def test_profile_dataframe() -> None:
    profile = profile_dataframe(load_csv(SALES))
    assert profile["row_count"] == 3
    assert profile["column_count"] == 3
    assert profile["data_types"] == {"region": "text", "units": "numeric", "price": "numeric"}
    assert profile["missing_values"] == {"region": 0, "units": 0, "price": 0}
    assert profile["duplicates"] == 0
    assert profile["statistics"]["units"]["mean"] == 20.0
    assert profile["statistics"]["units"]["min"] == 10.0
    assert profile["statistics"]["price"]["max"] == 7.5
    assert profile["sample_rows"][0] == {"region": "North", "units": "10", "price": "2.5"}


def test_top_correlations() -> None:
    df = load_csv(SALES)
    types = profile_dataframe(df)["data_types"]
    pairs = top_correlations(df, types)
    assert pairs == [{"columns": ["units", "price"], "correlation": 1.0}]
    assert top_correlations(df, {"region": "text"}) == []


def test_clean_dataframe() -> None:
    df = load_csv("name,age\nAlice,30\nBob,\nAlice,30\n")
    types = {"name": "text", "age": "numeric"}
    cleaned, report = clean_dataframe(df, types)
    assert report["rows_processed"] == 3
    assert report["rows_remaining"] == 2
    assert report["issues_fixed"]["duplicates_removed"] == 1
    assert report["issues_fixed"]["missing_values"] == 1
    assert cleaned["age"].tolist() == [30.0, 30.0]
    assert "Removed duplicate records" in report["operations_performed"]


def test_clean_dataframe_fills_text_with_mode_and_drops_empty_columns() -> None:
    df = pd.DataFrame({
        "city": ["Paris", "Paris", "", "Rome"],
        "id": ["1", "2", "3", "4"],
        "blank": ["", "", "", ""],
    })
    types = {"city": "text", "id": "numeric", "blank": "unknown"}
    cleaned, report = clean_dataframe(df, types)
    assert "blank" not in cleaned.columns
    assert cleaned["city"].tolist() == ["Paris", "Paris", "Paris", "Rome"]
    assert report["issues_fixed"]["empty_columns_dropped"] == 1


def test_find_column_and_to_numbers() -> None:
    df = pd.DataFrame(columns=["Service Name", "Cost_USD"])
    assert find_column(df, ["service name"]) == "Service Name"
    assert find_column(df, ["cost"]) == "Cost_USD"
    assert find_column(df, ["region"]) is None

    numbers = to_numbers(pd.Series(["$1,200.00", "abc", " 3 "]))
    assert numbers[0] == 1200.0
    assert math.isnan(numbers[1])
    assert numbers[2] == 3.0


def test_summarize_billing() -> None:
    df = load_csv('service,cost\nEC2,"$1,200.00"\nEC2,500\nS3,300\n')
    summary = summarize_billing(df)
    assert summary.total_spend == 2000.0
    assert summary.row_count == 3
    assert [(service.service, service.cost, service.percentage) for service in summary.services] == [
        ("EC2", 1700.0, 85.0),
        ("S3", 300.0, 15.0),
    ]
    assert summary.top_items[0].cost == 1200.0
    assert len(summary.top_services) == 2


def test_summarize_billing_needs_cost_column() -> None:
    with pytest.raises(AgentInputError, match="Billing CSV must include a cost column"):
        summarize_billing(load_csv("service,region\nEC2,us-east-1\n"))
