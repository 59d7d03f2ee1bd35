# backend/analystpro/services/financial.py

"""
Financial & What-If calculators
-------------------------------
Spreadsheet-style PMT / FV plus a simple percentage scenario over a numeric
column total. Sign conventions follow spreadsheet tools: money paid out is
negative.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence


def pmt(rate: float, nper: int, pv: float) -> float:
    """Periodic payment for a loan of present value `pv` over `nper` periods."""
    if nper <= 0:
        raise ValueError("nper must be positive")
    if rate == 0:
        return -(pv / nper)
    pvif = (1 + rate) ** nper
    return (rate / (pvif - 1)) * -(pv * pvif)


def fv(rate: float, nper: int, payment: float, pv: float) -> float:
    """Future value after `nper` periods of `payment` on top of `pv`."""
    if rate == 0:
        return -(pv + payment * nper)
    pvif = (1 + rate) ** nper
    return -pv * pvif - (payment / rate) * (pvif - 1)


def loan_summary(loan_amount: float, annual_rate_pct: float, term_years: int) -> Dict[str, float]:
    """Monthly payment and total interest for a fixed-rate loan."""
    months = term_years * 12
    monthly = pmt(annual_rate_pct / 100 / 12, months, -loan_amount)
    return {
        "monthly_payment": round(monthly, 2),
        "total_paid": round(monthly * months, 2),
        "total_interest": round(monthly * months - loan_amount, 2),
    }


def what_if(column: str, values: Sequence[float], change_pct: float) -> Dict[str, Any]:
    """Current total of `values` and the total after a `change_pct` percent change."""
    current = float(sum(values))
    projected = current * (1 + change_pct / 100)
    return {
        "column": column,
        "change_pct": change_pct,
        "current_total": round(current, 2),
        "projected_total": round(projected, 2),
        "delta": round(projected - current, 2),
    }
