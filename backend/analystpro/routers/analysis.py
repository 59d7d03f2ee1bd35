# backend/analystpro/routers/analysis.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from loguru import logger

from ..schemas.analysis import (
    PivotRequest,
    PivotResponse,
    CorrelationResponse,
    InsightsResponse,
    WhatIfRequest,
    WhatIfResponse,
    LoanRequest,
    LoanResponse,
    FutureValueRequest,
    FutureValueResponse,
)
from ..services.classifier import prepare_dataset
from ..services.profiling import build_profile
from ..services.pivot import compute_pivot
from ..services.stats import correlation_matrix
from ..services.trends import generate_insights, summarize_kpis
from ..services.financial import fv, loan_summary, what_if
from .ingest import load_dataset_rows

router = APIRouter(tags=["analysis"])


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
def _numeric_kpis(dataset_id: str) -> List[Dict[str, Any]]:
    _, rows = load_dataset_rows(dataset_id)
    return build_profile(rows)["numeric_kpis"]


def _find_kpi(kpis: List[Dict[str, Any]], column: str) -> Dict[str, Any]:
    for kpi in kpis:
        if kpi["column"] == column:
            return kpi
    raise HTTPException(404, f"Numeric column '{column}' not found")


# -------------------------------------------------------------------
# PIVOT
# -------------------------------------------------------------------
@router.post("/{dataset_id}/pivot", response_model=PivotResponse)
def pivot(dataset_id: str, req: PivotRequest) -> PivotResponse:
    """
    Group by row_dim x col_dim and aggregate value_dim.
    "None" as a dimension collapses everything into "Total".
    """
    _, rows = load_dataset_rows(dataset_id)
    # date-serial columns are pivoted on their converted form
    prepared_rows = prepare_dataset(rows)["rows"]

    try:
        result = compute_pivot(prepared_rows, req.row_dim, req.col_dim, req.value_dim, req.func)
    except ValueError as e:
        raise HTTPException(400, str(e))

    return PivotResponse(ok=True, dataset_id=dataset_id, **result)


# -------------------------------------------------------------------
# CORRELATION
# -------------------------------------------------------------------
@router.get("/{dataset_id}/correlation", response_model=CorrelationResponse)
def correlation(dataset_id: str) -> CorrelationResponse:
    payload = correlation_matrix(_numeric_kpis(dataset_id))
    return CorrelationResponse(ok=True, dataset_id=dataset_id, **payload)


# -------------------------------------------------------------------
# INSIGHTS
# -------------------------------------------------------------------
@router.get("/{dataset_id}/insights", response_model=InsightsResponse)
def insights(dataset_id: str, column: Optional[str] = Query(None)) -> InsightsResponse:
    """
    Trend / forecast / anomaly statements per numeric column.
    Pass `column` to restrict the statements to one column.
    """
    kpis = _numeric_kpis(dataset_id)
    targets = [_find_kpi(kpis, column)] if column else kpis

    per_column = [generate_insights(kpi["column"], kpi["values"]) for kpi in targets]
    logger.info(f"Insights for '{dataset_id}': {len(per_column)} columns")

    return InsightsResponse(
        ok=True,
        dataset_id=dataset_id,
        summary=summarize_kpis(kpis),
        columns=per_column,
    )


# -------------------------------------------------------------------
# WHAT-IF & FINANCIAL
# -------------------------------------------------------------------
@router.post("/{dataset_id}/what-if", response_model=WhatIfResponse)
def scenario(dataset_id: str, req: WhatIfRequest) -> WhatIfResponse:
    kpi = _find_kpi(_numeric_kpis(dataset_id), req.column)
    result = what_if(kpi["column"], kpi["values"], req.change_pct)
    return WhatIfResponse(ok=True, dataset_id=dataset_id, **result)


@router.post("/pmt", response_model=LoanResponse)
def loan_payment(req: LoanRequest) -> LoanResponse:
    result = loan_summary(req.loan_amount, req.annual_rate_pct, req.term_years)
    return LoanResponse(ok=True, **result)


@router.post("/fv", response_model=FutureValueResponse)
def future_value(req: FutureValueRequest) -> FutureValueResponse:
    value = fv(req.rate_pct / 100, req.periods, req.payment, req.present_value)
    return FutureValueResponse(ok=True, future_value=round(value, 2))
