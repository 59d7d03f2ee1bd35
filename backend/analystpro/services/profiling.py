# backend/analystpro/services/profiling.py

"""
Dataset profiling for AnalystPro.

- Loads spreadsheet / CSV files into row dictionaries.
- Classifies columns and converts date-serial columns.
- Builds numeric KPIs (avg / median / std dev / min / max) and
  categorical KPIs (top-5 value frequencies).
- Returns JSON-ready dictionaries (validated by Pydantic in routers).
"""
from __future__ import annotations

import os
from collections import Counter
from datetime import date, datetime
from typing import Dict, Any, List, Sequence

import pandas as pd
import numpy as np
from loguru import logger

from ..utils.io import read_any
from .cells import CellKind, as_number, cell_text, read_cell
from .classifier import prepare_dataset
from .stats import median, stddev


TOP_N_CATEGORIES = 5
MISSING_LABEL = "N/A"


def _to_py(obj: Any) -> Any:
    """Convert numpy/pandas scalars to plain Python types for JSON safety."""
    if isinstance(obj, (np.generic,)):
        obj = obj.item()
    if isinstance(obj, datetime):
        if obj.hour == obj.minute == obj.second == obj.microsecond == 0:
            return obj.strftime("%Y-%m-%d")
        return obj.isoformat()
    if isinstance(obj, date):
        return obj.isoformat()
    return obj


def dataframe_to_rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Turn a DataFrame into row dicts: NaN/NaT -> None, numpy -> Python, timestamps -> ISO strings."""
    clean = df.astype(object).where(pd.notna(df), None)
    return [
        {str(k): _to_py(v) for k, v in record.items()}
        for record in clean.to_dict(orient="records")
    ]


def build_preview(df: pd.DataFrame, n: int = 10) -> Dict[str, Any]:
    """Return preview JSON: first N rows (records), column order, shape, and dtypes."""
    n = max(1, int(n))
    records = dataframe_to_rows(df.head(n))
    dtypes = {str(col): str(dtype) for col, dtype in df.dtypes.items()}
    return {
        "rows": len(df),
        "cols": df.shape[1],
        "columns": [str(c) for c in df.columns],
        "dtypes": dtypes,
        "data": records,
    }


# ------------------------------------------------------------
# KPIs
# ------------------------------------------------------------
def build_numeric_kpi(column: str, rows: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """One value per row; missing or non-numeric readings count as 0."""
    values: List[float] = []
    for row in rows:
        number = as_number(read_cell(row.get(column)))
        values.append(number if number is not None else 0)

    if not values:
        avg = 0.0
        lo = hi = 0.0
    else:
        avg = sum(values) / len(values)
        lo, hi = min(values), max(values)

    return {
        "column": column,
        "values": values,
        "count": len(values),
        "min": round(float(lo), 2),
        "max": round(float(hi), 2),
        "avg": round(avg, 2),
        # derived from the unrounded average
        "median": round(median(values), 2),
        "std_dev": round(stddev(values, avg), 2),
    }


def build_categorical_kpi(column: str, rows: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """Top value frequencies; ties keep first-seen order."""
    labels = []
    for row in rows:
        cell = read_cell(row.get(column))
        labels.append(MISSING_LABEL if cell.kind is CellKind.EMPTY else cell_text(cell))

    counts = Counter(labels).most_common()
    return {
        "column": column,
        "top_values": [{"name": name, "count": count} for name, count in counts[:TOP_N_CATEGORIES]],
        "unique_count": len(counts),
    }


def build_profile(rows: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Full KPI set for a dataset.

    Returns {column_names, numeric_kpis, categorical_kpis, date_columns,
    raw_rows, row_count}. The input rows are not modified.
    """
    prepared = prepare_dataset(rows)
    prepared_rows = prepared["rows"]

    numeric_kpis = [build_numeric_kpi(col, prepared_rows) for col in prepared["numeric"]]
    categorical_kpis = [build_categorical_kpi(col, prepared_rows) for col in prepared["categorical"]]

    logger.info(
        f"Profiled {len(prepared_rows)} rows: {len(numeric_kpis)} numeric, "
        f"{len(categorical_kpis)} categorical, {len(prepared['date_columns'])} date columns"
    )
    return {
        "column_names": prepared["columns"],
        "numeric_kpis": numeric_kpis,
        "categorical_kpis": categorical_kpis,
        "date_columns": prepared["date_columns"],
        "raw_rows": prepared_rows,
        "row_count": len(prepared_rows),
    }


def load_dataframe_from_path(path: str) -> pd.DataFrame:
    """Load a dataset file at `path` to DataFrame, with a few pragmatic fallbacks."""
    if not path or not os.path.exists(path):
        raise FileNotFoundError(f"Dataset file not found: {path}")
    df = read_any(path)

    # Basic normalization: keep column name strings
    df.columns = [str(c) for c in df.columns]
    return df
