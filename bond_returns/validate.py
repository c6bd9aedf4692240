from __future__ import annotations
import argparse
import os, sys, json, math
from pathlib import Path
from typing import Any, Dict, List
import yaml

from .errors import InvalidInput
from .schema import INVARIANTS, SALE_PRICE_SCHEMA, SCHEMA, SELECTION_KEYS, TOP_LEVEL_KEYS
from .types import BondTerms


def _mode_from_env_or_flag(flag: str | None) -> str:
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"


def validate_terms(terms: BondTerms) -> List[str]:
    """
    Core range invariants of a bond. Returns a list of problems, empty when
    the terms are fit for calculation.
    """
    problems: List[str] = []
    for name, (lo, lo_incl, hi, hi_incl) in INVARIANTS.items():
        v = float(getattr(terms, name))
        if math.isnan(v):
            problems.append(f"{name} must be a number")
            continue
        if not math.isfinite(v):
            problems.append(f"{name} must be finite: {v}")
            continue
        ok_lo = v >= lo if lo_incl else v > lo
        ok_hi = v <= hi if hi_incl else v < hi
        if not (ok_lo and ok_hi):
            lb = "[" if lo_incl else "("
            rb = "]" if hi_incl else ")"
            problems.append(f"{name} outside allowed range {lb}{lo}, {hi}{rb}: {v}")
    if terms.maturity_date <= terms.purchase_date:
        problems.append(
            f"maturity_date {terms.maturity_date.isoformat()} must be after "
            f"purchase_date {terms.purchase_date.isoformat()}"
        )
    return problems


def _schema_problems(bond: Dict[str, Any]) -> List[str]:
    problems: List[str] = []
    for k, rule in SCHEMA.items():
        if rule.get("type") != "float" or k not in bond:
            continue
        v = float(bond[k])
        lo = float(rule.get("min", float("-inf")))
        hi = float(rule.get("max", float("inf")))
        if not (lo <= v <= hi):
            problems.append(f"bond.{k} outside allowed range [{lo}, {hi}]: {v}")
    return problems


def _selection_problems(sel: Dict[str, Any], *, mode: str) -> List[str]:
    problems: List[str] = []
    years = sel.get("exit_years")
    if years is not None:
        if not isinstance(years, list):
            problems.append("selections.exit_years must be a list")
        else:
            bad = [y for y in years if isinstance(y, bool) or not isinstance(y, int) or y < 1]
            if bad:
                problems.append(f"selections.exit_years must be positive integers: {bad}")
    prices = sel.get("sale_prices")
    if prices is not None:
        if not isinstance(prices, list):
            problems.append("selections.sale_prices must be a list")
        else:
            bad = [p for p in prices
                   if isinstance(p, bool) or not isinstance(p, (int, float)) or not p > 0]
            if bad:
                problems.append(f"selections.sale_prices must be positive numbers: {bad}")
            elif mode == "strict":
                hi = float(SALE_PRICE_SCHEMA["max"])
                over = [p for p in prices if p > hi]
                if over:
                    problems.append(f"selections.sale_prices above {hi}: {over}")
    return problems


def validate_params_dict(data: Dict[str, Any], *, mode: str = "relaxed") -> None:
    """
    Guardrails for a scenario file:
      - relaxed: require {bond}; bond terms must satisfy the core invariants
      - strict : also enforce the form bounds in SCHEMA and reject unknown keys
    """
    if not isinstance(data, dict):
        raise SystemExit("scenario file must contain a mapping")
    if "bond" not in data:
        raise SystemExit("missing required keys: ['bond']")
    bond = data.get("bond") or {}
    if not isinstance(bond, dict):
        raise SystemExit("bond must be a mapping")
    sel = data.get("selections") or {}
    if not isinstance(sel, dict):
        raise SystemExit("selections must be a mapping")

    if mode == "strict":
        unknown = [k for k in data.keys() if k not in TOP_LEVEL_KEYS]
        if unknown:
            raise SystemExit(f"unknown top-level keys (strict mode): {unknown}")
        unknown = [k for k in bond.keys() if k not in SCHEMA]
        if unknown:
            raise SystemExit(f"unknown bond keys (strict mode): {unknown}")
        unknown = [k for k in sel.keys() if k not in SELECTION_KEYS]
        if unknown:
            raise SystemExit(f"unknown selection keys (strict mode): {unknown}")

    try:
        terms = BondTerms.from_dict(bond)
    except InvalidInput as e:
        raise SystemExit(str(e))

    problems = validate_terms(terms)
    if mode == "strict":
        problems += _schema_problems(bond)
    problems += _selection_problems(sel, mode=mode)
    if problems:
        raise SystemExit("; ".join(problems))


YAML_SUFFIXES = (".yaml", ".yml")
SCENARIO_SUFFIXES = YAML_SUFFIXES + (".json",)


def load_params_from_file(path: Path) -> Dict[str, Any]:
    """Read one scenario: YAML by suffix, JSON otherwise. Empty files give {}."""
    p = Path(path)
    if p.is_dir():
        raise SystemExit(f"{p} is a directory (expected a scenario file)")
    with p.open(encoding="utf-8") as fh:
        if p.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(fh)
        else:
            text = fh.read()
            data = json.loads(text) if text.strip() else None
    return {} if data is None else data


def scenario_files(target: Path) -> List[Path]:
    """A single scenario file, or the YAML/JSON scenarios directly inside a directory."""
    p = Path(target)
    if p.is_file():
        return [p]
    if not p.is_dir():
        return []
    return sorted(f for f in p.iterdir() if f.is_file() and f.suffix.lower() in SCENARIO_SUFFIXES)


def check_file(path: Path, *, mode: str | None = None) -> Dict[str, Any]:
    """Load and validate a scenario file; returns its parameters."""
    data = load_params_from_file(path)
    validate_params_dict(data, mode=_mode_from_env_or_flag(mode))
    return data


def _main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="bond_returns.validate")
    parser.add_argument("paths", nargs="+", help="scenario files or directories of scenarios")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    args = parser.parse_args(argv)
    mode = _mode_from_env_or_flag(args.mode)

    failures = 0
    for raw in args.paths:
        files = scenario_files(Path(raw))
        if not files:
            print(f"{raw}: no YAML/JSON scenario files found", file=sys.stderr)
            failures += 1
        for f in files:
            try:
                check_file(f, mode=mode)
            except SystemExit as e:
                print(f"{f}: {e}", file=sys.stderr)
                failures += 1
            except (OSError, ValueError, yaml.YAMLError) as e:
                print(f"{f}: ERROR: {e}", file=sys.stderr)
                failures += 1
            else:
                print(f"OK: {f}")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(_main())
