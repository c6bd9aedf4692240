from __future__ import annotations

import calendar
from datetime import date
from typing import List, Sequence

import pandas as pd

from bond_returns.errors import InvalidInput, ScenarioOutOfRange
from bond_returns.finance.costs import monthly_coupon, net_monthly_coupon, total_cost
from bond_returns.finance.irr import year_fraction
from bond_returns.types import BondTerms, CashFlow, ExitScenario


def add_months(dt: date, months: int) -> date:
    """Return the date ``months`` calendar months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def build(terms: BondTerms, exit_year: int, sale_price: float) -> List[CashFlow]:
    """
    Cash flows of holding the bond for ``exit_year`` years and selling it at
    ``sale_price`` percent of face value:

        [-total cost at purchase] + [net coupon each month]

    with the sale proceeds added to the last monthly coupon. The result has
    exit_year * 12 + 1 entries in date order.
    """
    if isinstance(exit_year, bool) or int(exit_year) != exit_year:
        raise InvalidInput(f"exit year must be a whole number of years, got {exit_year!r}")
    years = int(exit_year)
    ceiling = terms.max_exit_year
    if years < 1 or years > ceiling:
        raise ScenarioOutOfRange(
            f"exit year must be between 1 and {ceiling} for maturity "
            f"{terms.maturity_date.isoformat()}, got {years}"
        )
    if not sale_price > 0:
        raise InvalidInput(f"sale price must be greater than 0, got {sale_price}")

    # acquisition cost, brokerage included, is sunk at t0
    flows: List[CashFlow] = [
        CashFlow(
            date=terms.purchase_date,
            amount=-total_cost(
                terms.face_value, terms.purchase_price, terms.accrued_interest, terms.brokerage
            ),
        )
    ]

    coupon = net_monthly_coupon(
        monthly_coupon(terms.face_value, terms.coupon_rate), terms.tds_rate
    )
    proceeds = terms.face_value * (float(sale_price) / 100.0)

    total_months = years * 12
    for month in range(1, total_months + 1):
        amount = coupon
        if month == total_months:
            amount += proceeds
        flows.append(CashFlow(date=add_months(terms.purchase_date, month), amount=amount))
    return flows


def scenario_cashflows(terms: BondTerms, scenario: ExitScenario) -> List[CashFlow]:
    return build(terms, scenario.exit_year, scenario.sale_price)


def cashflow_table(flows: Sequence[CashFlow]) -> pd.DataFrame:
    """Flows as a frame with the year offset used by the XIRR solver."""
    if not flows:
        return pd.DataFrame(columns=["date", "amount", "years"])
    t0 = min(cf.date for cf in flows)
    return pd.DataFrame(
        {
            "date": [cf.date for cf in flows],
            "amount": [float(cf.amount) for cf in flows],
            "years": [year_fraction(t0, cf.date) for cf in flows],
        }
    )


__all__ = ["add_months", "build", "scenario_cashflows", "cashflow_table"]
