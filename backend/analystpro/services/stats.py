# backend/analystpro/services/stats.py

"""
Numeric statistics used by the profiler, the insight generator and the
correlation view.

All functions accept plain Python sequences and return plain floats.
Degenerate inputs return 0 instead of NaN so the results are always
JSON-safe.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Sequence

import numpy as np


def median(values: Sequence[float]) -> float:
    """Middle value of the sorted input; mean of the two middle values for even length."""
    if len(values) == 0:
        return 0.0
    ordered = sorted(values)
    half = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[half])
    return (ordered[half - 1] + ordered[half]) / 2.0


def stddev(values: Sequence[float], mean: float) -> float:
    """
    Population standard deviation around `mean`.

    The mean is passed in rather than recomputed so the caller decides
    whether a rounded or unrounded average is used.
    """
    if len(values) == 0:
        return 0.0
    arr = np.asarray(values, dtype=float)
    return float(math.sqrt(float(np.mean((arr - mean) ** 2))))


def correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient computed from sums of products.

    Returns 0 for mismatched lengths, empty input and constant series.
    """
    n = len(x)
    if n != len(y) or n == 0:
        return 0.0

    xa = np.asarray(x, dtype=float)
    ya = np.asarray(y, dtype=float)
    if np.ptp(xa) == 0 or np.ptp(ya) == 0:
        return 0.0

    sum_x = float(np.sum(xa))
    sum_y = float(np.sum(ya))
    sum_xy = float(np.sum(xa * ya))
    sum_x2 = float(np.sum(xa * xa))
    sum_y2 = float(np.sum(ya * ya))

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_x2 - sum_x ** 2) * (n * sum_y2 - sum_y ** 2)
    if spread <= 0:
        return 0.0
    denominator = math.sqrt(spread)
    if denominator == 0 or not math.isfinite(denominator):
        return 0.0
    return numerator / denominator


def correlation_matrix(numeric_kpis: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Square Pearson grid across numeric KPIs; the diagonal is fixed at 1."""
    columns = [kpi["column"] for kpi in numeric_kpis]
    matrix: List[List[float]] = []
    for i, row_kpi in enumerate(numeric_kpis):
        row: List[float] = []
        for j, col_kpi in enumerate(numeric_kpis):
            if i == j:
                row.append(1.0)
            else:
                row.append(correlation(row_kpi["values"], col_kpi["values"]))
        matrix.append(row)
    return {"method": "pearson", "columns": columns, "matrix": matrix}
