"""
Finance metrics façade.

Design:
- NPV/IRR/XIRR implementations live only in bond_returns.finance.irr (singleton).
- This module must not *define* irr/npv/xirr (no 'def irr' / 'def npv' here).
- It re-exports the helpers reports and tests use, next to the cost engine.
"""
from .costs import cost_summary as cost_summary  # re-exports only
from .irr import (
    monthly_irr_annualized as monthly_irr_annualized,
    npv as npv,
    xirr as xirr,
    xnpv as xnpv,
)

__all__ = ["cost_summary", "npv", "xnpv", "xirr", "monthly_irr_annualized"]
