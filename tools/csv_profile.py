"""CSV loading, profiling and deterministic cleaning with pandas."""
import io
import math
import warnings
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from tools.text_input import looks_like_file


def load_csv(source: str) -> pd.DataFrame:
    """Read a CSV file path or inline CSV text, keeping every cell as a string."""
    handle = source if looks_like_file(source) else io.StringIO(source)
    return pd.read_csv(handle, dtype=str, keep_default_na=False, skipinitialspace=True)


def _blank(series: pd.Series) -> pd.Series:
    return series.isna() | (series.astype(str).str.strip() == "")


def _number(value: Any) -> Optional[float]:
    if value is None:
        return None
    number = float(value)
    return None if math.isnan(number) or math.isinf(number) else round(number, 4)


def infer_column_type(series: pd.Series) -> str:
    """numeric, date, text, or unknown when the column is empty."""
    values = series[~_blank(series)].astype(str).str.strip()
    if values.empty:
        return "unknown"
    if pd.to_numeric(values, errors="coerce").notna().all():
        return "numeric"
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        parsed = pd.to_datetime(values, errors="coerce")
    if parsed.notna().all():
        return "date"
    return "text"


def numeric_frame(df: pd.DataFrame, types: Dict[str, str]) -> pd.DataFrame:
    columns = [column for column, kind in types.items() if kind == "numeric"]
    return df[columns].apply(pd.to_numeric, errors="coerce") if columns else pd.DataFrame(index=df.index)


def profile_dataframe(df: pd.DataFrame, sample_size: int = 5) -> Dict[str, Any]:
    """Column types, missing values, duplicates, numeric statistics and sample rows."""
    types = {column: infer_column_type(df[column]) for column in df.columns}
    numbers = numeric_frame(df, types)

    statistics = {}
    for column in numbers.columns:
        series = numbers[column].dropna()
        if series.empty:
            continue
        statistics[column] = {
            "count": int(series.count()),
            "mean": _number(series.mean()),
            "median": _number(series.median()),
            "std": _number(series.std()) if series.count() > 1 else 0.0,
            "min": _number(series.min()),
            "max": _number(series.max()),
        }

    return {
        "columns": list(df.columns),
        "row_count": int(len(df)),
        "column_count": int(len(df.columns)),
        "data_types": types,
        "missing_values": {column: int(_blank(df[column]).sum()) for column in df.columns},
        "duplicates": int(df.duplicated().sum()),
        "statistics": statistics,
        "sample_rows": df.head(sample_size).to_dict(orient="records"),
    }


def top_correlations(df: pd.DataFrame, types: Dict[str, str], limit: int = 5) -> List[Dict[str, Any]]:
    """Strongest pairwise Pearson correlations between numeric columns."""
    numbers = numeric_frame(df, types)
    if numbers.shape[1] < 2:
        return []
    matrix = numbers.corr()
    pairs = []
    columns = list(matrix.columns)
    for i, left in enumerate(columns):
        for right in columns[i + 1:]:
            value = _number(matrix.loc[left, right])
            if value is not None:
                pairs.append({"columns": [left, right], "correlation": value})
    pairs.sort(key=lambda pair: abs(pair["correlation"]), reverse=True)
    return pairs[:limit]


def clean_dataframe(df: pd.DataFrame, types: Dict[str, str]) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """Trim text, drop duplicate rows and fill gaps (median for numbers, mode for the rest).

    Columns with no values at all are dropped.
    """
    cleaned = df.copy()
    operations: List[str] = []
    fixed = {
        "missing_values": 0,
        "duplicates_removed": 0,
        "type_conversions": 0,
        "formats_standardized": 0,
        "empty_columns_dropped": 0,
    }

    trimmed = cleaned.apply(lambda column: column.astype(str).str.strip())
    fixed["formats_standardized"] = int((trimmed != cleaned.astype(str)).sum().sum())
    cleaned = trimmed
    if fixed["formats_standardized"]:
        operations.append("Trimmed surrounding whitespace")

    empty = [column for column, kind in types.items() if kind == "unknown"]
    if empty:
        cleaned = cleaned.drop(columns=empty)
        fixed["empty_columns_dropped"] = len(empty)
        operations.append(f"Dropped empty columns: {', '.join(empty)}")

    before = len(cleaned)
    cleaned = cleaned.drop_duplicates().reset_index(drop=True)
    fixed["duplicates_removed"] = before - len(cleaned)
    if fixed["duplicates_removed"]:
        operations.append("Removed duplicate records")

    for column in cleaned.columns:
        missing = cleaned[column] == ""
        count = int(missing.sum())
        kind = types.get(column)
        filled = 0
        if kind == "numeric":
            numbers = pd.to_numeric(cleaned[column].where(~missing), errors="coerce")
            fill = numbers.median()
            if count and not math.isnan(fill):
                numbers = numbers.fillna(fill)
                filled = count
            cleaned[column] = numbers
            fixed["type_conversions"] += 1
        elif count:
            present = cleaned[column][~missing]
            fill = present.mode().iloc[0] if not present.empty else "Unknown"
            cleaned.loc[missing, column] = fill
            filled = count
        fixed["missing_values"] += filled

    if fixed["missing_values"]:
        operations.append("Filled missing values (median for numeric, most frequent value otherwise)")
    if fixed["type_conversions"]:
        operations.append("Converted numeric columns")

    return cleaned, {
        "rows_processed": int(before),
        "rows_remaining": int(len(cleaned)),
        "issues_fixed": fixed,
        "operations_performed": operations,
    }


def find_column(df: pd.DataFrame, candidates: List[str]) -> Optional[str]:
    """First column whose normalised name equals, then contains, one of `candidates`."""
    normalised = {column: column.lower().replace("_", " ").replace("/", " ").strip() for column in df.columns}
    for candidate in candidates:
        for column, name in normalised.items():
            if name == candidate:
                return column
    for candidate in candidates:
        for column, name in normalised.items():
            if candidate in name:
                return column
    return None


def to_numbers(series: pd.Series) -> pd.Series:
    """Parse numeric text such as `$1,234.50`; unparseable cells become NaN."""
    cleaned = series.astype(str).str.replace(r"[$,\s]", "", regex=True)
    return pd.to_numeric(cleaned, errors="coerce")
