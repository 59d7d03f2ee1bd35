# backend/analystpro/services/trends.py

"""
Trend & Anomaly Detection
-------------------------
Provides:
- Linear trend (ordinary least squares over row order) + one-step forecast
- Tukey IQR outlier detection
- Per-column insight statements
- Dataset-level summary lines over all numeric KPIs

Row order is the only time axis; no date column is consulted.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from loguru import logger


TREND_THRESHOLD = 0.05
IQR_FACTOR = 1.5
MIN_ANOMALY_POINTS = 4


# ------------------------------------------------------------
# Trend
# ------------------------------------------------------------
def _direction(slope: float) -> str:
    if slope > TREND_THRESHOLD:
        return "increasing"
    if slope < -TREND_THRESHOLD:
        return "decreasing"
    return "stable"


def calculate_trend(values: Sequence[float]) -> Dict[str, Any]:
    """
    Fit y = slope * x + intercept with x = 0..n-1 and forecast x = n.

    Fewer than two points (or a zero denominator) yields a flat, stable
    trend whose forecast is the last observed value.
    """
    n = len(values)
    last = float(values[-1]) if n else 0.0
    flat = {"slope": 0.0, "intercept": last, "forecast": last, "direction": "stable"}
    if n < 2:
        return flat

    sum_x = sum(range(n))
    sum_y = sum(values)
    sum_xy = sum(i * v for i, v in enumerate(values))
    sum_x2 = sum(i * i for i in range(n))

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return flat

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return {
        "slope": float(slope),
        "intercept": float(intercept),
        "forecast": float(slope * n + intercept),
        "direction": _direction(slope),
    }


# ------------------------------------------------------------
# Anomalies
# ------------------------------------------------------------
def detect_anomalies(values: Sequence[float]) -> List[float]:
    """
    Values strictly outside [Q1 - 1.5*IQR, Q3 + 1.5*IQR], in input order.

    Quartiles are picked by index (floor(n/4), floor(3n/4)) from the sorted
    values, without interpolation.
    """
    n = len(values)
    if n < MIN_ANOMALY_POINTS:
        return []
    ordered = sorted(values)
    q1 = ordered[n // 4]
    q3 = ordered[(3 * n) // 4]
    iqr = q3 - q1
    lower = q1 - IQR_FACTOR * iqr
    upper = q3 + IQR_FACTOR * iqr
    return [v for v in values if v < lower or v > upper]


# ------------------------------------------------------------
# Insights
# ------------------------------------------------------------
def generate_insights(column: str, values: Sequence[float]) -> Dict[str, Any]:
    """Compose trend, forecast and anomaly statements for one numeric column."""
    trend = calculate_trend(values)
    anomalies = detect_anomalies(values)

    insights: List[Dict[str, str]] = []
    if trend["direction"] != "stable":
        insights.append({
            "type": "trend",
            "text": f"{column} shows a statistically significant {trend['direction']} trend.",
            "severity": "high",
        })
    insights.append({
        "type": "prediction",
        "text": f"Forecasted next value: {trend['forecast']:.2f}.",
        "severity": "medium",
    })
    if anomalies:
        insights.append({
            "type": "anomaly",
            "text": f"Detected {len(anomalies)} outliers in the data distribution.",
            "severity": "critical",
        })

    logger.debug(f"Insights for '{column}': direction={trend['direction']} anomalies={len(anomalies)}")
    return {
        "column": column,
        "insights": insights,
        "anomalies": anomalies,
        "forecast": trend["forecast"],
        "slope": trend["slope"],
        "direction": trend["direction"],
    }


def summarize_kpis(numeric_kpis: List[Dict[str, Any]]) -> List[str]:
    """Dataset-level summary lines: coverage, highest average, high variability."""
    if not numeric_kpis:
        return []

    lines = [f"Automatically analyzed {len(numeric_kpis)} numeric columns."]

    # max() keeps the first column on ties
    top = max(numeric_kpis, key=lambda k: k["avg"])
    lines.append(f"\"{top['column']}\" has the highest average value ({top['avg']}).")

    for kpi in numeric_kpis:
        if kpi["max"] - kpi["min"] > kpi["avg"] * 2:
            lines.append(
                f"\"{kpi['column']}\" shows high variability between minimum and maximum values."
            )
    return lines
