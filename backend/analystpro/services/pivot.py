# backend/analystpro/services/pivot.py

"""
Pivot Engine
------------
Group rows by a row dimension and a column dimension and aggregate a value
dimension into a dense grid.

- The sentinel dimension "None" collapses every row into the key "Total".
- A row whose real row or column dimension is empty is skipped.
- Count counts every row in a bucket; Sum/Average/Max/Min only use
  native numeric readings (non-numeric readings are left out, not zeroed).
- Keys are sorted ascending as strings; empty buckets read as 0.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from .cells import Cell, CellKind, cell_text, read_cell


NONE_DIMENSION = "None"
TOTAL_KEY = "Total"

AGGREGATIONS: Dict[str, Callable[[List[Any]], float]] = {
    "Sum": lambda vals: sum(vals),
    "Average": lambda vals: sum(vals) / len(vals),
    "Count": lambda vals: len(vals),
    "Max": lambda vals: max(vals),
    "Min": lambda vals: min(vals),
}


def _resolve_key(row: Dict[str, Any], dimension: str) -> Optional[str]:
    """Bucket key for `row` along `dimension`, or None when the row must be skipped."""
    if dimension == NONE_DIMENSION:
        return TOTAL_KEY
    cell = read_cell(row.get(dimension))
    if cell.kind is CellKind.EMPTY:
        return None
    return cell_text(cell)


def compute_pivot(
    rows: Sequence[Dict[str, Any]],
    row_dim: str,
    col_dim: str,
    value_dim: str,
    func: str,
) -> Dict[str, Any]:
    """Return {"row_keys", "col_keys", "grid"} with grid[row_key][col_key] rounded to 2 dp."""
    if func not in AGGREGATIONS:
        raise ValueError(f"Unsupported aggregation: {func}")
    aggregate = AGGREGATIONS[func]

    row_keys = set()
    col_keys = set()
    buckets: Dict[Tuple[str, str], List[Any]] = {}

    for row in rows:
        r_key = _resolve_key(row, row_dim)
        if r_key is None:
            continue
        c_key = _resolve_key(row, col_dim)
        if c_key is None:
            continue

        row_keys.add(r_key)
        col_keys.add(c_key)
        bucket = buckets.setdefault((r_key, c_key), [])

        cell: Cell = read_cell(row.get(value_dim))
        if func == "Count":
            bucket.append(cell.value)
        elif cell.kind is CellKind.NUMBER:
            bucket.append(cell.value)

    sorted_rows = sorted(row_keys)
    sorted_cols = sorted(col_keys)

    grid: Dict[str, Dict[str, float]] = {}
    for r_key in sorted_rows:
        grid[r_key] = {}
        for c_key in sorted_cols:
            vals = buckets.get((r_key, c_key), [])
            result = aggregate(vals) if vals else 0
            grid[r_key][c_key] = round(float(result), 2)

    logger.debug(
        f"Pivot {func}({value_dim}) by {row_dim} x {col_dim}: "
        f"{len(sorted_rows)} rows, {len(sorted_cols)} cols"
    )
    return {"row_keys": sorted_rows, "col_keys": sorted_cols, "grid": grid}
