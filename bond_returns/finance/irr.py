# bond_returns/finance/irr.py
"""
Single home of the NPV / IRR maths.

Dated flows (XIRR) use a fixed year length of 365.25 days measured from the
earliest flow. This ignores actual leap-year day counts and differs slightly
from Actual/365 or 30/360; rates computed here are defined against this basis.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

import numpy as np
import numpy_financial as npf

from ..errors import (
    DegenerateCashFlows,
    Divergence,
    InsufficientData,
    InvalidInput,
    NonConvergence,
)
from ..types import CashFlow

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25
INITIAL_GUESS = 0.10
MAX_ITERATIONS = 100
TOLERANCE = 1e-6
MIN_RATE = -0.99
MAX_RATE = 10.0


def _as_datetime(d: date) -> datetime:
    if isinstance(d, datetime):
        return d
    return datetime(d.year, d.month, d.day)


def year_fraction(start: date, end: date) -> float:
    """Years between two dates on the 365.25-day basis."""
    delta = _as_datetime(end) - _as_datetime(start)
    return delta.total_seconds() / (DAYS_PER_YEAR * 86400.0)


# ---------- NPV ----------
def npv(rate: float, cashflows: Iterable[float]) -> float:
    """NPV of equally spaced flows, the first one undiscounted (period 0)."""
    amounts = np.asarray(list(cashflows), dtype=float)
    if amounts.size == 0:
        return 0.0
    if rate <= -1.0:
        raise InvalidInput(f"discount rate must be above -100%, got {rate}")
    return _npv_and_derivative(float(rate), amounts, np.arange(amounts.size, dtype=float))[0]


def _time_basis(cashflows: Sequence[CashFlow]):
    ordered = sorted(cashflows, key=lambda cf: _as_datetime(cf.date))
    t0 = ordered[0].date
    years = np.array([year_fraction(t0, cf.date) for cf in ordered], dtype=float)
    amounts = np.array([float(cf.amount) for cf in ordered], dtype=float)
    return amounts, years


def _npv_and_derivative(rate: float, amounts: np.ndarray, years: np.ndarray):
    base = 1.0 + rate
    discount = np.power(base, -years)
    value = float(np.sum(amounts * discount))
    derivative = float(np.sum(-years * amounts * discount / base))
    return value, derivative


def xnpv(rate: float, cashflows: Sequence[CashFlow]) -> float:
    """NPV of dated flows, discounted to the earliest date."""
    if not cashflows:
        return 0.0
    amounts, years = _time_basis(cashflows)
    return _npv_and_derivative(float(rate), amounts, years)[0]


# ---------- XIRR ----------
def xirr(
    cashflows: Sequence[CashFlow],
    *,
    guess: float = INITIAL_GUESS,
    max_iterations: int = MAX_ITERATIONS,
    tolerance: float = TOLERANCE,
) -> float:
    """
    Annualized rate r with NPV(r) = 0 for irregularly dated flows, found by
    Newton-Raphson. Returns a decimal rate (0.12 = 12%).

    Raises InsufficientData, DegenerateCashFlows, NonConvergence or Divergence.
    """
    flows: List[CashFlow] = list(cashflows or [])
    if len(flows) < 2:
        raise InsufficientData(
            f"at least two cash flows are required for XIRR, got {len(flows)}"
        )
    has_pos = any(cf.amount > 0 for cf in flows)
    has_neg = any(cf.amount < 0 for cf in flows)
    if not (has_pos and has_neg):
        raise DegenerateCashFlows(
            "cash flows must contain at least one positive and one negative amount"
        )
    r = float(guess)
    if not (MIN_RATE <= r <= MAX_RATE):
        raise InvalidInput(f"initial guess must lie in [{MIN_RATE}, {MAX_RATE}], got {r}")

    amounts, years = _time_basis(flows)

    for i in range(int(max_iterations)):
        value, derivative = _npv_and_derivative(r, amounts, years)
        if abs(value) < tolerance:
            logger.debug("xirr converged on NPV after %d iterations: %.10f", i, r)
            return r
        if abs(derivative) < tolerance:
            raise NonConvergence(
                f"XIRR derivative too close to zero at rate {r:.6f} (iteration {i + 1})"
            )
        r_new = r - value / derivative
        if abs(r_new - r) < tolerance:
            logger.debug("xirr converged on step after %d iterations: %.10f", i + 1, r_new)
            return r_new
        r = r_new
        if not (MIN_RATE <= r <= MAX_RATE):
            raise Divergence(
                f"XIRR diverged to {r:.6g} (allowed [{MIN_RATE}, {MAX_RATE}]) at iteration {i + 1}"
            )

    raise NonConvergence(f"XIRR failed to converge after {int(max_iterations)} iterations")


# ---------- IRR (periodic) ----------
def irr(cashflows: Iterable[float]) -> Optional[float]:
    """
    Periodic IRR via numpy-financial. Returns a decimal rate per period, or
    None when the stream has no real root.
    """
    cfs = [float(x) for x in cashflows]
    if len(cfs) < 2:
        return None
    val = float(npf.irr(cfs))
    if val != val:  # NaN check
        return None
    return val


def monthly_irr_annualized(cashflows: Sequence[CashFlow]) -> Optional[float]:
    """
    Treat the flows as equally spaced months, solve the periodic IRR and
    compound it to a year: (1 + m)^12 - 1. A cross-check for ``xirr``.
    """
    ordered = sorted(cashflows, key=lambda cf: _as_datetime(cf.date))
    amounts = [float(cf.amount) for cf in ordered]
    m = irr(amounts)
    if m is None or m <= -1.0:
        return None
    # polynomial roots of long streams can be inexact; keep only ones that zero the NPV
    scale = sum(abs(a) for a in amounts)
    if abs(npv(m, amounts)) > TOLERANCE * scale:
        return None
    return (1.0 + m) ** 12 - 1.0


__all__ = [
    "DAYS_PER_YEAR",
    "year_fraction",
    "npv",
    "xnpv",
    "xirr",
    "irr",
    "monthly_irr_annualized",
]
