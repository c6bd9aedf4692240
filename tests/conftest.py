from datetime import date

import pytest

from bond_returns.types import BondTerms


@pytest.fixture
def default_terms() -> BondTerms:
    """The reference bond: 11.9% coupon bought at 102.5 with 10% TDS."""
    return BondTerms(
        face_value=100000.0,
        coupon_rate=11.9,
        purchase_price=102.5,
        accrued_interest=358.63,
        brokerage=0.0,
        purchase_date=date(2025, 10, 3),
        maturity_date=date(2030, 12, 31),
        tds_rate=10.0,
    )


@pytest.fixture
def default_params():
    return {
        "bond": {
            "face_value": 100000,
            "coupon_rate": 11.9,
            "purchase_price": 102.5,
            "accrued_interest": 358.63,
            "brokerage": 0,
            "purchase_date": "2025-10-03",
            "maturity_date": "2030-12-31",
            "tds_rate": 10,
        },
        "selections": {"exit_years": [1, 2, 3, 4, 5], "sale_prices": [100, 101, 102, 102.5]},
    }
