# backend/tests/test_analysis.py

"""
Analysis endpoints
------------------
Covers:
- Pivot (sum by one dimension, two dimensions, invalid aggregation)
- Correlation matrix
- Insights (all columns, single column, unknown column)
- What-if scenario, loan calculator and future value
- Error handling for unknown datasets

Tests use small CSV files written at runtime.
"""

import os

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from backend.analystpro.main import app


client = TestClient(app)


# -----------------------------------------------------------
# Helpers
# -----------------------------------------------------------
def _insert_dataset(tmpdir, df, name):
    """Write the CSV and register it through the API."""
    dataset_id = f"ds_{name}"
    path = os.path.join(tmpdir, f"{dataset_id}.csv")
    df.to_csv(path, index=False)

    r = client.post("/ingest/register", json={
        "id": dataset_id,
        "name": dataset_id,
        "path": path
    })
    assert r.status_code == 200
    return dataset_id


@pytest.fixture
def sales_id(tmp_path, isolated_registry):
    df = pd.DataFrame({
        "region": ["A", "A", "B", "B", None],
        "channel": ["web", "store", "web", "web", "web"],
        "amount": [10, 20, 5, 7, 100],
        "units": [1, 2, 3, 4, 5],
    })
    return _insert_dataset(tmp_path, df, "sales")


# -----------------------------------------------------------
# PIVOT
# -----------------------------------------------------------
def test_pivot_sum_by_region(sales_id):
    r = client.post(f"/analysis/{sales_id}/pivot", json={
        "row_dim": "region",
        "col_dim": "None",
        "value_dim": "amount",
        "func": "Sum",
    })
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["row_keys"] == ["A", "B"]
    assert body["col_keys"] == ["Total"]
    assert body["grid"] == {"A": {"Total": 30}, "B": {"Total": 12}}


def test_pivot_two_dimensions_count(sales_id):
    r = client.post(f"/analysis/{sales_id}/pivot", json={
        "row_dim": "region",
        "col_dim": "channel",
        "value_dim": "amount",
        "func": "Count",
    })
    body = r.json()
    assert body["col_keys"] == ["store", "web"]
    assert body["grid"] == {
        "A": {"store": 1, "web": 1},
        "B": {"store": 0, "web": 2},
    }


def test_pivot_rejects_unknown_function(sales_id):
    r = client.post(f"/analysis/{sales_id}/pivot", json={
        "row_dim": "region",
        "value_dim": "amount",
        "func": "Median",
    })
    assert r.status_code == 422


# -----------------------------------------------------------
# CORRELATION
# -----------------------------------------------------------
def test_correlation_matrix(sales_id):
    r = client.get(f"/analysis/{sales_id}/correlation")
    assert r.status_code == 200
    body = r.json()
    assert body["method"] == "pearson"
    assert body["columns"] == ["amount", "units"]
    assert body["matrix"][0][0] == 1
    assert body["matrix"][0][1] == body["matrix"][1][0]
    assert -1 <= body["matrix"][0][1] <= 1


# -----------------------------------------------------------
# INSIGHTS
# -----------------------------------------------------------
def test_insights_all_columns(sales_id):
    r = client.get(f"/analysis/{sales_id}/insights")
    assert r.status_code == 200
    body = r.json()
    assert [c["column"] for c in body["columns"]] == ["amount", "units"]
    assert body["summary"][0] == "Automatically analyzed 2 numeric columns."

    units = body["columns"][1]
    assert units["direction"] == "increasing"
    assert units["forecast"] == pytest.approx(6.0)


def test_insights_single_column(sales_id):
    r = client.get(f"/analysis/{sales_id}/insights", params={"column": "amount"})
    body = r.json()
    assert [c["column"] for c in body["columns"]] == ["amount"]
    amount = body["columns"][0]
    assert amount["anomalies"] == [100]
    assert any(i["type"] == "anomaly" for i in amount["insights"])


def test_insights_unknown_column(sales_id):
    r = client.get(f"/analysis/{sales_id}/insights", params={"column": "region"})
    assert r.status_code == 404


# -----------------------------------------------------------
# WHAT-IF & FINANCIAL
# -----------------------------------------------------------
def test_what_if(sales_id):
    r = client.post(f"/analysis/{sales_id}/what-if", json={"column": "amount", "change_pct": 10})
    assert r.status_code == 200
    body = r.json()
    assert body["current_total"] == 142
    assert body["projected_total"] == pytest.approx(156.2)


def test_loan_payment():
    r = client.post("/analysis/pmt", json={"loan_amount": 100000, "annual_rate_pct": 5, "term_years": 30})
    assert r.status_code == 200
    assert r.json()["monthly_payment"] == pytest.approx(536.82, abs=0.01)


def test_loan_payment_validates_input():
    r = client.post("/analysis/pmt", json={"loan_amount": -5})
    assert r.status_code == 422


# -----------------------------------------------------------
# BAD REQUEST HANDLING
# -----------------------------------------------------------
@pytest.mark.parametrize("method,url,payload", [
    ("post", "/analysis/unknown123/pivot", {"value_dim": "x"}),
    ("get", "/analysis/unknown123/correlation", None),
    ("get", "/analysis/unknown123/insights", None),
    ("post", "/analysis/unknown123/what-if", {"column": "x"}),
])
def test_unknown_dataset(isolated_registry, method, url, payload):
    if method == "post":
        r = client.post(url, json=payload)
    else:
        r = client.get(url)
    assert r.status_code == 404


def test_future_value():
    r = client.post("/analysis/fv", json={"rate_pct": 10, "periods": 2, "present_value": -1000})
    assert r.status_code == 200
    assert r.json()["future_value"] == pytest.approx(1210)


def test_future_value_requires_periods():
    r = client.post("/analysis/fv", json={"rate_pct": 10, "periods": 0})
    assert r.status_code == 422
