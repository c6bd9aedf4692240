# bond_returns/finance/costs.py
"""
Bond cost helpers used by the cash-flow builder and the summary block:
 - total_cost(face_value, purchase_price, accrued_interest, brokerage)
 - monthly_coupon(face_value, coupon_rate)
 - net_monthly_coupon(monthly_coupon, tds_rate)
 - cost_summary(terms)

Rates and prices are in percent. Stateless; keep this module self-contained.
"""

from __future__ import annotations

from bond_returns.errors import InvalidInput
from bond_returns.types import BondTerms, CostSummary


def total_cost(
    face_value: float,
    purchase_price: float,
    accrued_interest: float,
    brokerage: float = 0.0,
) -> float:
    """Acquisition cost: F * P/100 + accrued interest + brokerage."""
    F = float(face_value)
    P = float(purchase_price)
    A = float(accrued_interest)
    B = float(brokerage)
    if F <= 0:
        raise InvalidInput(f"face value must be greater than 0, got {F}")
    if P <= 0:
        raise InvalidInput(f"purchase price must be greater than 0, got {P}")
    if A < 0:
        raise InvalidInput(f"accrued interest cannot be negative, got {A}")
    if B < 0:
        raise InvalidInput(f"brokerage cannot be negative, got {B}")
    return F * (P / 100.0) + A + B


def monthly_coupon(face_value: float, coupon_rate: float) -> float:
    """Gross monthly coupon: F * C/100 / 12."""
    F = float(face_value)
    C = float(coupon_rate)
    if F <= 0:
        raise InvalidInput(f"face value must be greater than 0, got {F}")
    if C < 0:
        raise InvalidInput(f"coupon rate cannot be negative, got {C}")
    return F * (C / 100.0) / 12.0


def net_monthly_coupon(monthly_coupon: float, tds_rate: float) -> float:
    """Monthly coupon after tax withheld at source."""
    mc = float(monthly_coupon)
    t = float(tds_rate)
    if mc < 0:
        raise InvalidInput(f"monthly coupon cannot be negative, got {mc}")
    if not (0.0 <= t <= 100.0):
        raise InvalidInput(f"TDS rate must be between 0 and 100, got {t}")
    return mc * (1.0 - t / 100.0)


def cost_summary(terms: BondTerms) -> CostSummary:
    gross = monthly_coupon(terms.face_value, terms.coupon_rate)
    return CostSummary(
        total_cost=total_cost(
            terms.face_value, terms.purchase_price, terms.accrued_interest, terms.brokerage
        ),
        monthly_coupon=gross,
        net_monthly_coupon=net_monthly_coupon(gross, terms.tds_rate),
    )


__all__ = ["total_cost", "monthly_coupon", "net_monthly_coupon", "cost_summary"]
