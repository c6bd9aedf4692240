# bond_returns/adapters.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from bond_returns.config import resolve_selections, split_config
from bond_returns.errors import BondCalcError
from bond_returns.events import EventRecorder
from bond_returns.finance.cashflow import build
from bond_returns.finance.costs import cost_summary
from bond_returns.finance.irr import monthly_irr_annualized
from bond_returns.report import matrix_records, matrix_to_json
from bond_returns.scenario_runner import build_matrix
from bond_returns.types import BondTerms


def _terms(params: Dict[str, Any]) -> BondTerms:
    bond, _ = split_config(params)
    return BondTerms.from_dict(bond)


def _monthly_cross_check(terms: BondTerms, years: List[int], prices: List[float]) -> Dict[str, Dict[str, Optional[float]]]:
    """Monthly-compounded periodic IRR per cell, None where no rate exists."""
    out: Dict[str, Dict[str, Optional[float]]] = {}
    for y in years:
        row = out.setdefault(str(y), {})
        for p in prices:
            try:
                row[f"{p:g}"] = monthly_irr_annualized(build(terms, y, p))
            except BondCalcError:
                row[f"{p:g}"] = None
    return out


# ------------------------------
# Public adapter(s)
# ------------------------------
def run_xirr(params: Dict[str, Any], *, recorder: Optional[EventRecorder] = None) -> Dict[str, Any]:
    """
    High-level adapter:
      1) Parse bond terms and resolve exit-year / sale-price selections.
      2) Cost block: total cost, gross and net monthly coupon.
      3) XIRR matrix with per-cell diagnostics, plus a monthly IRR cross-check.

    Returns:
      {
        'bond': {...}, 'total_cost': float, 'monthly_coupon': float,
        'net_monthly_coupon': float, 'max_exit_year': int,
        'exit_years': [...], 'sale_prices': [...],
        'matrix': {'1': {'100': float|None, ...}, ...},
        'cells': [{'exit_year', 'sale_price', 'xirr', 'xirr_pct', 'band'}, ...],
        'diagnostics': [str, ...],
        'monthly_irr_annualized': {...same shape as matrix...},
      }
    """
    _, sel = split_config(params)
    terms = _terms(params)
    years, prices = resolve_selections(terms, sel)

    costs = cost_summary(terms)
    result = build_matrix(terms, years, prices, recorder=recorder)

    return {
        "bond": terms.to_dict(),
        "total_cost": costs.total_cost,
        "monthly_coupon": costs.monthly_coupon,
        "net_monthly_coupon": costs.net_monthly_coupon,
        "max_exit_year": terms.max_exit_year,
        "exit_years": years,
        "sale_prices": prices,
        "matrix": matrix_to_json(result.matrix),
        "cells": matrix_records(result.matrix),
        "diagnostics": list(result.diagnostics),
        "monthly_irr_annualized": _monthly_cross_check(terms, years, prices),
    }


def cashflow_records(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Every scenario's dated flows as flat rows; out-of-range cells are skipped."""
    _, sel = split_config(params)
    terms = _terms(params)
    years, prices = resolve_selections(terms, sel)
    rows: List[Dict[str, Any]] = []
    for y in years:
        for p in prices:
            try:
                flows = build(terms, y, p)
            except BondCalcError:
                continue
            for i, cf in enumerate(flows):
                rows.append(
                    {
                        "exit_year": y,
                        "sale_price": p,
                        "period": i,
                        "date": cf.date.isoformat(),
                        "amount": cf.amount,
                    }
                )
    return rows


__all__ = ["run_xirr", "cashflow_records"]
