from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, Dict, List, Mapping

from .errors import InvalidInput

# exit year -> sale price (% of face) -> XIRR, NaN when the cell failed
RateMatrix = Dict[int, Dict[float, float]]


def _as_date(name: str, v: Any) -> date:
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str):
        try:
            return date.fromisoformat(v.strip()[:10])
        except ValueError as e:
            raise InvalidInput(f"{name} must be an ISO date (YYYY-MM-DD): {v!r}") from e
    raise InvalidInput(f"{name} must be a date: {v!r}")


def _as_number(name: str, v: Any) -> float:
    if isinstance(v, bool):
        raise InvalidInput(f"{name} must be a number: {v!r}")
    try:
        return float(v)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"{name} must be a number: {v!r}") from e


@dataclass(frozen=True)
class BondTerms:
    """
    Purchase terms of a bond. Percentages are in percent (11.9 = 11.9%).

    Construction does not check ranges; see ``validate.validate_terms``.
    """
    face_value: float
    coupon_rate: float
    purchase_price: float
    accrued_interest: float
    brokerage: float
    purchase_date: date
    maturity_date: date
    tds_rate: float

    @property
    def max_exit_year(self) -> int:
        """Longest whole-year holding period the maturity date allows."""
        return self.maturity_date.year - self.purchase_date.year

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "BondTerms":
        missing = [f.name for f in fields(cls) if f.name not in d and f.name != "brokerage"]
        if missing:
            raise InvalidInput(f"missing bond terms: {missing}")
        return cls(
            face_value=_as_number("face_value", d["face_value"]),
            coupon_rate=_as_number("coupon_rate", d["coupon_rate"]),
            purchase_price=_as_number("purchase_price", d["purchase_price"]),
            accrued_interest=_as_number("accrued_interest", d["accrued_interest"]),
            brokerage=_as_number("brokerage", d.get("brokerage", 0.0)),
            purchase_date=_as_date("purchase_date", d["purchase_date"]),
            maturity_date=_as_date("maturity_date", d["maturity_date"]),
            tds_rate=_as_number("tds_rate", d["tds_rate"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {f.name: getattr(self, f.name) for f in fields(self)}
        out["purchase_date"] = self.purchase_date.isoformat()
        out["maturity_date"] = self.maturity_date.isoformat()
        return out


@dataclass(frozen=True)
class ExitScenario:
    exit_year: int
    sale_price: float


@dataclass(frozen=True)
class CashFlow:
    date: date
    amount: float


@dataclass(frozen=True)
class CostSummary:
    total_cost: float
    monthly_coupon: float
    net_monthly_coupon: float


@dataclass
class MatrixResult:
    matrix: RateMatrix = field(default_factory=dict)
    diagnostics: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.matrix


__all__ = [
    "RateMatrix",
    "BondTerms",
    "ExitScenario",
    "CashFlow",
    "CostSummary",
    "MatrixResult",
]
