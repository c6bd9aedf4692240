"""
Presentation helpers for rate matrices: percent formatting, return bands and
pandas tables for printing or export.
"""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

import pandas as pd

from .types import RateMatrix

NOT_AVAILABLE = "N/A"

# lower bound of each band, best first
BANDS = (
    ("excellent", 0.15),
    ("good", 0.12),
    ("fair", 0.08),
)


def is_available(rate: Optional[float]) -> bool:
    return rate is not None and math.isfinite(rate)


def format_rate(rate: Optional[float], digits: int = 2) -> str:
    """0.1234 -> '12.34%'; the failure sentinel renders as 'N/A'."""
    if not is_available(rate):
        return NOT_AVAILABLE
    return f"{rate * 100.0:.{digits}f}%"


def rate_band(rate: Optional[float]) -> str:
    if not is_available(rate):
        return "unavailable"
    for name, floor in BANDS:
        if rate >= floor:
            return name
    return "poor"


def format_price(price: float) -> str:
    return f"{price:g}"


def matrix_frame(matrix: RateMatrix) -> pd.DataFrame:
    """Rows are exit years, columns sale prices (% of face)."""
    years = sorted(matrix)
    prices = sorted({p for row in matrix.values() for p in row})
    data = [[matrix[y].get(p, float("nan")) for p in prices] for y in years]
    frame = pd.DataFrame(data, index=pd.Index(years, name="exit_year"), columns=prices, dtype=float)
    frame.columns.name = "sale_price"
    return frame


def render_matrix(matrix: RateMatrix) -> str:
    if not matrix:
        return "(no scenarios selected)"
    frame = matrix_frame(matrix)
    shown = frame.apply(lambda col: col.map(format_rate))
    shown.columns = [f"{format_price(p)}%" for p in frame.columns]
    return shown.to_string()


def matrix_records(matrix: RateMatrix) -> List[Dict[str, Any]]:
    """Flat rows for JSONL/CSV output. Failed cells carry xirr=None."""
    rows: List[Dict[str, Any]] = []
    for year in sorted(matrix):
        for price in sorted(matrix[year]):
            rate = matrix[year][price]
            ok = is_available(rate)
            rows.append(
                {
                    "exit_year": year,
                    "sale_price": price,
                    "xirr": float(rate) if ok else None,
                    "xirr_pct": format_rate(rate),
                    "band": rate_band(rate),
                }
            )
    return rows


def matrix_to_json(matrix: RateMatrix) -> Dict[str, Dict[str, Optional[float]]]:
    """JSON-friendly nested mapping; NaN becomes None."""
    return {
        str(year): {
            format_price(price): (float(rate) if is_available(rate) else None)
            for price, rate in sorted(row.items())
        }
        for year, row in sorted(matrix.items())
    }


__all__ = [
    "NOT_AVAILABLE",
    "format_rate",
    "rate_band",
    "matrix_frame",
    "render_matrix",
    "matrix_records",
    "matrix_to_json",
]
