from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import yaml

from .errors import BondCalcError
from .report import format_rate, render_matrix
# Only imports the thin runner; heavy math stays behind scenario_runner
from .scenario_runner import RunResult, run_dir


def parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="bond_returns",
        description="Bond purchase cost and XIRR scenario matrix calculator",
    )
    p.add_argument(
        "--config",
        required=False,
        default=None,
        help="Path to a scenario YAML/JSON, or a directory of scenarios to validate. If omitted, uses the packaged default case.",
    )
    p.add_argument(
        "--outputs-dir",
        default="outputs",
        help="Directory to write result files (default: outputs). Will be created if missing.",
    )
    p.add_argument(
        "--format",
        dest="fmt",
        default="csv",
        choices=["csv", "jsonl"],
        help="Output format for matrix/cash-flow files (default: csv).",
    )
    p.add_argument(
        "--save-cashflows",
        action="store_true",
        help="If set, write every scenario's dated cash flows alongside the matrix.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    v = p.add_mutually_exclusive_group()
    v.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict validation (form bounds enforced, unknown keys raise).",
    )
    v.add_argument(
        "--relaxed",
        action="store_true",
        help="Enable relaxed validation (core invariants only).",
    )
    return p.parse_args(argv)


def _apply_validation_mode(ns: argparse.Namespace) -> None:
    # Default: leave env as-is; flags override explicitly.
    if ns.strict:
        os.environ["VALIDATION_MODE"] = "strict"
    elif ns.relaxed:
        os.environ["VALIDATION_MODE"] = "relaxed"


def _print_summary(res: RunResult) -> None:
    s = res.summary
    if "total_cost" not in s:
        print(f"Validated {s.get('files', 0)} scenario file(s).")
        return
    print(f"Total cost:          {s['total_cost']:,.2f}")
    print(f"Monthly coupon:      {s['monthly_coupon']:,.2f}")
    print(f"Net monthly coupon:  {s['net_monthly_coupon']:,.2f}")
    print()
    matrix = {
        int(y): {float(p): (r if r is not None else float("nan")) for p, r in row.items()}
        for y, row in s.get("matrix", {}).items()
    }
    print("Return matrix (XIRR):")
    print(render_matrix(matrix))
    for msg in s.get("diagnostics", []):
        print(f"  ! {msg}")
    best = [c for c in s.get("cells", []) if c["xirr"] is not None]
    if best:
        top = max(best, key=lambda c: c["xirr"])
        print(
            f"\nBest: exit year {top['exit_year']} at {top['sale_price']:g}% -> {format_rate(top['xirr'])}"
        )
    print(f"\nWrote {res.summary_path}")


def main(argv: list[str] | None = None) -> int:
    ns = parse_args(argv)
    _apply_validation_mode(ns)
    level = logging.DEBUG if ns.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("bond_returns").setLevel(level)

    outputs_dir = Path(ns.outputs_dir).resolve()
    cfg_path: Path | None = Path(ns.config).resolve() if ns.config else None
    outputs_dir.mkdir(parents=True, exist_ok=True)

    try:
        res = run_dir(cfg_path, outputs_dir, fmt=ns.fmt, save_cashflows=ns.save_cashflows)
    except SystemExit as e:
        # Validation failures surface as SystemExit with a message
        if isinstance(e.code, int):
            return e.code
        print(f"ERROR: {e.code}", file=sys.stderr)
        return 2
    except (BondCalcError, OSError, ValueError, yaml.YAMLError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    _print_summary(res)
    return 0


__all__ = ["main", "parse_args"]
