# backend/analystpro/services/classifier.py

"""
Column classification and spreadsheet date-serial handling.

A column is numeric when its first rows hold at least one present value and
every present value reads as a finite number. Numeric columns whose values
look like spreadsheet date serials are rewritten as ISO date strings and
handed to the categorical side.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Sequence

from loguru import logger

from .cells import CellKind, as_number, is_present, read_cell


SAMPLE_ROWS = 50

# Serials between these bounds fall roughly in 1987..2105
DATE_SERIAL_MIN = 32000
DATE_SERIAL_MAX = 75000
DATE_SERIAL_RATIO = 0.8

# Days between the spreadsheet epoch (1899-12-30) and 1970-01-01
UNIX_EPOCH_SERIAL = 25569

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def column_names(rows: Sequence[Dict[str, Any]]) -> List[str]:
    """Column universe of the dataset, taken from the first row."""
    if not rows:
        return []
    return [str(c) for c in rows[0].keys()]


def is_numeric_column(rows: Sequence[Dict[str, Any]], column: str) -> bool:
    present = 0
    for row in rows[:SAMPLE_ROWS]:
        cell = read_cell(row.get(column))
        if not is_present(cell):
            continue
        present += 1
        if as_number(cell) is None:
            return False
    return present > 0


def classify_columns(rows: Sequence[Dict[str, Any]], columns: Iterable[str]) -> Dict[str, List[str]]:
    """Split `columns` into {"numeric": [...], "categorical": [...]}, keeping column order."""
    numeric: List[str] = []
    categorical: List[str] = []
    for col in columns:
        if is_numeric_column(rows, col):
            numeric.append(col)
        else:
            categorical.append(col)
    return {"numeric": numeric, "categorical": categorical}


# ------------------------------------------------------------
# Date serials
# ------------------------------------------------------------
def is_likely_date_serial(values: Sequence[Any]) -> bool:
    """True when more than 80% of the first 50 values are numbers inside (32000, 75000)."""
    sample = list(values[:SAMPLE_ROWS])
    if not sample:
        return False
    in_range = 0
    for raw in sample:
        cell = read_cell(raw)
        if cell.kind is CellKind.NUMBER and DATE_SERIAL_MIN < cell.value < DATE_SERIAL_MAX:
            in_range += 1
    return in_range / len(sample) > DATE_SERIAL_RATIO


def serial_to_date_str(serial: float) -> str:
    """Spreadsheet serial -> 'YYYY-MM-DD' (UTC, fractional day dropped)."""
    days = math.floor(serial - UNIX_EPOCH_SERIAL)
    date = _UNIX_EPOCH + timedelta(seconds=days * 86400)
    return f"{date.year:04d}-{date.month:02d}-{date.day:02d}"


def convert_date_columns(rows: Sequence[Dict[str, Any]], columns: Iterable[str]) -> List[Dict[str, Any]]:
    """
    Return new rows where every numeric cell of `columns` is replaced by its
    date string. The input rows are left untouched.
    """
    targets = list(columns)
    converted: List[Dict[str, Any]] = []
    for row in rows:
        new_row = dict(row)
        for col in targets:
            cell = read_cell(row.get(col))
            if cell.kind is not CellKind.NUMBER:
                continue
            try:
                new_row[col] = serial_to_date_str(cell.value)
            except (OverflowError, ValueError):
                # outside the datetime range; keep the raw serial
                logger.warning(f"Serial {cell.value!r} in '{col}' is not a representable date")
        converted.append(new_row)
    return converted


def prepare_dataset(rows: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Classify the dataset and convert its date-serial columns.

    Returns:
        {
          "rows": converted rows (new list),
          "columns": column names from row 0,
          "numeric": numeric column names,
          "categorical": categorical column names (date columns included),
          "date_columns": converted column names,
        }
    """
    columns = column_names(rows)
    split = classify_columns(rows, columns)

    date_columns = [
        col for col in split["numeric"]
        if is_likely_date_serial([row.get(col) for row in rows[:SAMPLE_ROWS]])
    ]
    if date_columns:
        logger.info(f"Converting date-serial columns: {date_columns}")
        rows = convert_date_columns(rows, date_columns)
    else:
        rows = [dict(row) for row in rows]

    numeric = [c for c in split["numeric"] if c not in date_columns]
    categorical = [c for c in columns if c not in numeric]
    return {
        "rows": rows,
        "columns": columns,
        "numeric": numeric,
        "categorical": categorical,
        "date_columns": date_columns,
    }
