import math

import pytest

from bond_returns.report import (
    format_rate,
    matrix_frame,
    matrix_records,
    matrix_to_json,
    rate_band,
    render_matrix,
)

NAN = float("nan")
MATRIX = {1: {100.0: 0.1234, 102.5: NAN}, 2: {100.0: 0.0912, 102.5: 0.1611}}


@pytest.mark.parametrize(
    "rate,text",
    [(0.1234, "12.34%"), (0.0, "0.00%"), (-0.0251, "-2.51%"), (NAN, "N/A"), (math.inf, "N/A"), (None, "N/A")],
)
def test_format_rate(rate, text):
    assert format_rate(rate) == text


@pytest.mark.parametrize(
    "rate,band",
    [(0.20, "excellent"), (0.15, "excellent"), (0.13, "good"), (0.12, "good"),
     (0.10, "fair"), (0.079, "poor"), (-0.5, "poor"), (NAN, "unavailable")],
)
def test_rate_band(rate, band):
    assert rate_band(rate) == band


def test_matrix_frame():
    df = matrix_frame(MATRIX)
    assert list(df.index) == [1, 2]
    assert list(df.columns) == [100.0, 102.5]
    assert df.loc[2, 102.5] == pytest.approx(0.1611)
    assert math.isnan(df.loc[1, 102.5])


def test_render_matrix_marks_failures():
    text = render_matrix(MATRIX)
    assert "12.34%" in text
    assert "N/A" in text
    assert "102.5%" in text
    assert render_matrix({}) == "(no scenarios selected)"


def test_records_and_json_use_none_for_failures():
    rows = matrix_records(MATRIX)
    assert len(rows) == 4
    failed = [r for r in rows if r["xirr"] is None]
    assert failed == [
        {"exit_year": 1, "sale_price": 102.5, "xirr": None, "xirr_pct": "N/A", "band": "unavailable"}
    ]
    js = matrix_to_json(MATRIX)
    assert js["1"]["102.5"] is None
    assert js["2"]["100"] == pytest.approx(0.0912)
