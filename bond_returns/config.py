from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple
import io
import math
import os
from pathlib import Path

import yaml

from .errors import InvalidInput
from .types import BondTerms
from .validate import load_params_from_file

DEFAULT_CONFIG = Path(__file__).resolve().parent / "inputs" / "default_case.yaml"


def load_bond_config(
    source: str | os.PathLike | io.StringIO | None = None,
) -> Dict[str, Any]:
    """
    Load a scenario from a YAML/JSON path or a YAML text stream. With no
    source, the packaged default case is used.
    """
    if source is None:
        return load_params_from_file(DEFAULT_CONFIG)
    if hasattr(source, "read"):
        cfg = yaml.safe_load(str(source.read())) or {}
        if not isinstance(cfg, dict):
            raise SystemExit("scenario stream must contain a mapping")
        return cfg
    return load_params_from_file(Path(os.fspath(source)))


def split_config(cfg: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Return (bond_section, selections_section); both default to empty."""
    bond = cfg.get("bond") or {}
    sel = cfg.get("selections") or {}
    return dict(bond), dict(sel)


def available_exit_years(terms: BondTerms) -> List[int]:
    """Whole exit years 1..N the maturity date allows (empty if none)."""
    return list(range(1, max(0, terms.max_exit_year) + 1))


def default_sale_prices(purchase_price: float) -> List[float]:
    """
    Sale price ladder in 0.5% steps spanning face value (100%) and the
    purchase price, rounded outward to the half point. Always contains 100
    and the exact purchase price.
    """
    P = float(purchase_price)
    start = math.floor(min(100.0, P) * 2) / 2
    end = math.ceil(max(100.0, P) * 2) / 2
    steps = int(round((end - start) * 2))
    prices = [start + i * 0.5 for i in range(steps + 1)]
    for must in (100.0, P):
        if must not in prices:
            prices.append(must)
    return sorted(prices)


def _exit_year(y: Any) -> int:
    if isinstance(y, bool) or not isinstance(y, (int, float)) or not math.isfinite(y) or y != int(y):
        raise InvalidInput(f"exit year must be a whole number of years, got {y!r}")
    return int(y)


def resolve_selections(
    terms: BondTerms,
    selections: Optional[Dict[str, Any]] = None,
) -> Tuple[List[int], List[float]]:
    """
    Exit years and sale prices to evaluate. A missing key falls back to the
    defaults; an explicitly empty list stays empty. Fractional exit years
    raise InvalidInput.
    """
    sel = selections or {}
    years: Sequence[Any] | None = sel.get("exit_years")
    prices: Sequence[Any] | None = sel.get("sale_prices")
    out_years = available_exit_years(terms) if years is None else [_exit_year(y) for y in years]
    out_prices = (
        default_sale_prices(terms.purchase_price) if prices is None else [float(p) for p in prices]
    )
    return sorted(set(out_years)), sorted(set(out_prices))


__all__ = [
    "DEFAULT_CONFIG",
    "load_bond_config",
    "split_config",
    "available_exit_years",
    "default_sale_prices",
    "resolve_selections",
]
