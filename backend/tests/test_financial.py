# backend/tests/test_financial.py
import pytest

from backend.analystpro.services.financial import fv, loan_summary, pmt, what_if


def test_pmt_zero_rate_splits_evenly():
    assert pmt(0, 12, 1200) == pytest.approx(-100)


def test_pmt_standard_mortgage():
    assert pmt(0.05 / 12, 360, -100000) == pytest.approx(536.82, abs=0.01)


def test_pmt_requires_periods():
    with pytest.raises(ValueError):
        pmt(0.01, 0, 1000)


def test_fv_zero_rate():
    assert fv(0, 10, -100, -1000) == pytest.approx(2000)


def test_fv_compounds():
    # 1000 invested at 10% for 2 periods, no payments
    assert fv(0.1, 2, 0, -1000) == pytest.approx(1210)


def test_loan_summary():
    summary = loan_summary(100000, 5, 30)
    assert summary["monthly_payment"] == pytest.approx(536.82, abs=0.01)
    assert summary["total_interest"] == pytest.approx(93255.78, abs=1)


def test_what_if_projection():
    result = what_if("sales", [10, 20, 30], 10)
    assert result["current_total"] == 60
    assert result["projected_total"] == 66
    assert result["delta"] == 6


def test_what_if_negative_change():
    result = what_if("sales", [50, 50], -50)
    assert result["projected_total"] == 50
    assert result["delta"] == -50
