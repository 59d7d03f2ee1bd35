from pydantic import BaseModel, Field
from typing import Dict, List, Literal

from .base import APIResponse


# ============================================================
# PIVOT
# ============================================================
class PivotRequest(BaseModel):
    row_dim: str = "None"               # column name or "None"
    col_dim: str = "None"
    value_dim: str
    func: Literal["Sum", "Average", "Count", "Max", "Min"] = "Sum"


class PivotResponse(APIResponse):
    dataset_id: str
    row_keys: List[str]
    col_keys: List[str]
    grid: Dict[str, Dict[str, float]]


# ============================================================
# CORRELATION
# ============================================================
class CorrelationResponse(APIResponse):
    dataset_id: str
    method: str
    columns: List[str]
    matrix: List[List[float]]


# ============================================================
# INSIGHTS
# ============================================================
class Insight(BaseModel):
    type: str                           # "trend" | "prediction" | "anomaly"
    text: str
    severity: str                       # "high" | "medium" | "critical"


class ColumnInsights(BaseModel):
    column: str
    insights: List[Insight]
    anomalies: List[float]
    forecast: float
    slope: float
    direction: str


class InsightsResponse(APIResponse):
    dataset_id: str
    summary: List[str]
    columns: List[ColumnInsights]


# ============================================================
# WHAT-IF & FINANCIAL
# ============================================================
class WhatIfRequest(BaseModel):
    column: str
    change_pct: float = Field(0.0, ge=-100, le=1000)


class WhatIfResponse(APIResponse):
    dataset_id: str
    column: str
    change_pct: float
    current_total: float
    projected_total: float
    delta: float


class LoanRequest(BaseModel):
    loan_amount: float = Field(100000, gt=0)
    annual_rate_pct: float = Field(5.0, ge=0)
    term_years: int = Field(30, ge=1, le=100)


class LoanResponse(APIResponse):
    monthly_payment: float
    total_paid: float
    total_interest: float


class FutureValueRequest(BaseModel):
    rate_pct: float = Field(0.0, ge=0)  # per period
    periods: int = Field(..., ge=1)
    payment: float = 0.0                # per period, negative = paid in
    present_value: float = 0.0


class FutureValueResponse(APIResponse):
    future_value: float
