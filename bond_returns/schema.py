from __future__ import annotations
from typing import Dict, Any

# Bond input schema: units, type, min/max ranges, and description.
# These are the form bounds of the calculator; strict validation enforces them.
SCHEMA: Dict[str, Dict[str, Any]] = {
    "face_value":       {"unit": "currency", "type": "float", "min": 1000.0, "max": 10_000_000.0, "desc": "Nominal principal of the bond"},
    "coupon_rate":      {"unit": "% p.a.",   "type": "float", "min": 0.0,    "max": 50.0,         "desc": "Annual coupon rate"},
    "purchase_price":   {"unit": "% of face","type": "float", "min": 50.0,   "max": 200.0,        "desc": "Clean purchase price"},
    "accrued_interest": {"unit": "currency", "type": "float", "min": 0.0,    "max": 100_000.0,    "desc": "Accrued interest paid to the seller"},
    "brokerage":        {"unit": "currency", "type": "float", "min": 0.0,    "max": 50_000.0,     "desc": "Brokerage paid at purchase"},
    "tds_rate":         {"unit": "%",        "type": "float", "min": 0.0,    "max": 50.0,         "desc": "Tax deducted at source on coupons"},
    "purchase_date":    {"unit": "date",     "type": "date",  "desc": "Settlement date of the purchase"},
    "maturity_date":    {"unit": "date",     "type": "date",  "after": "purchase_date", "desc": "Maturity date of the bond"},
}

# Hard ranges the numeric core relies on, checked in every mode.
# Each entry: (lower, lower inclusive, upper, upper inclusive).
INVARIANTS: Dict[str, tuple] = {
    "face_value":       (0.0, False, float("inf"), True),
    "coupon_rate":      (0.0, True,  float("inf"), True),
    "purchase_price":   (0.0, False, float("inf"), True),
    "accrued_interest": (0.0, True,  float("inf"), True),
    "brokerage":        (0.0, True,  float("inf"), True),
    "tds_rate":         (0.0, True,  100.0,        True),
}

# Selection bounds of the sale price ladder (percent of face).
SALE_PRICE_SCHEMA: Dict[str, Any] = {"min": 0.0, "max": 200.0, "step": 0.5, "unit": "% of face"}

TOP_LEVEL_KEYS = ("bond", "selections")
SELECTION_KEYS = ("exit_years", "sale_prices")
