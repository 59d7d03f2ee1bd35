# backend/tests/test_pivot.py
import pytest

from backend.analystpro.services.pivot import compute_pivot


SALES = [
    {"region": "A", "amount": 10},
    {"region": "A", "amount": 20},
    {"region": "B", "amount": 5},
]


def test_pivot_sum_by_region():
    result = compute_pivot(SALES, "region", "None", "amount", "Sum")
    assert result["row_keys"] == ["A", "B"]
    assert result["col_keys"] == ["Total"]
    assert result["grid"] == {"A": {"Total": 30}, "B": {"Total": 5}}


def test_pivot_both_dimensions_none_collapses_to_total():
    result = compute_pivot(SALES, "None", "None", "amount", "Average")
    assert result["row_keys"] == ["Total"]
    assert result["col_keys"] == ["Total"]
    assert result["grid"]["Total"]["Total"] == pytest.approx(11.67)


@pytest.mark.parametrize("func,expected", [
    ("Sum", {"A": 30, "B": 5}),
    ("Average", {"A": 15, "B": 5}),
    ("Count", {"A": 2, "B": 1}),
    ("Max", {"A": 20, "B": 5}),
    ("Min", {"A": 10, "B": 5}),
])
def test_pivot_aggregations(func, expected):
    result = compute_pivot(SALES, "region", "None", "amount", func)
    assert {k: v["Total"] for k, v in result["grid"].items()} == expected


def test_pivot_non_numeric_values_skipped_except_for_count():
    rows = [
        {"team": "x", "score": 10},
        {"team": "x", "score": "n/a"},
        {"team": "x", "score": None},
        {"team": "x", "score": "7"},
    ]
    assert compute_pivot(rows, "team", "None", "score", "Sum")["grid"]["x"]["Total"] == 10
    assert compute_pivot(rows, "team", "None", "score", "Average")["grid"]["x"]["Total"] == 10
    assert compute_pivot(rows, "team", "None", "score", "Min")["grid"]["x"]["Total"] == 10
    assert compute_pivot(rows, "team", "None", "score", "Count")["grid"]["x"]["Total"] == 4


def test_pivot_bucket_without_numbers_reads_zero():
    rows = [{"team": "x", "score": "none"}, {"team": "y", "score": 3}]
    grid = compute_pivot(rows, "team", "None", "score", "Max")["grid"]
    assert grid == {"x": {"Total": 0}, "y": {"Total": 3}}


def test_pivot_skips_rows_missing_a_dimension():
    rows = [
        {"region": "", "channel": "web", "amount": 100},
        {"region": "A", "channel": None, "amount": 100},
        {"channel": "web", "amount": 100},
        {"region": "A", "channel": "web", "amount": 1},
    ]
    result = compute_pivot(rows, "region", "channel", "amount", "Sum")
    assert result["row_keys"] == ["A"]
    assert result["col_keys"] == ["web"]
    assert result["grid"] == {"A": {"web": 1}}


def test_pivot_grid_is_dense():
    rows = [
        {"region": "A", "channel": "web", "amount": 1},
        {"region": "B", "channel": "store", "amount": 2},
    ]
    result = compute_pivot(rows, "region", "channel", "amount", "Sum")
    assert result["col_keys"] == ["store", "web"]
    assert result["grid"] == {
        "A": {"store": 0, "web": 1},
        "B": {"store": 2, "web": 0},
    }


def test_pivot_keys_sorted_as_strings():
    rows = [{"year": 9, "v": 1}, {"year": 10, "v": 1}, {"year": 2024.0, "v": 1}]
    result = compute_pivot(rows, "year", "None", "v", "Count")
    assert result["row_keys"] == ["10", "2024", "9"]


def test_pivot_rounds_to_two_decimals():
    rows = [{"k": "a", "v": 1.005}, {"k": "a", "v": 2.3333}]
    assert compute_pivot(rows, "k", "None", "v", "Sum")["grid"]["a"]["Total"] == round(3.3383, 2)


def test_pivot_unknown_value_column_gives_zero_grid():
    result = compute_pivot(SALES, "region", "None", "missing", "Sum")
    assert result["grid"] == {"A": {"Total": 0}, "B": {"Total": 0}}


def test_pivot_unknown_aggregation_raises():
    with pytest.raises(ValueError):
        compute_pivot(SALES, "region", "None", "amount", "Median")
