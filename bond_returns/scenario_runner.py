from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Iterable, List, Optional
import json, csv
import logging

from .errors import BondCalcError, DegenerateCashFlows, Divergence, InsufficientData, NonConvergence
from .events import BOND_CALCULATION, AnalyticsEvent, EventRecorder, NullRecorder
from .finance.cashflow import build
from .finance.irr import xirr
from .report import format_price
from .types import BondTerms, MatrixResult, RateMatrix
from .validate import (
    _mode_from_env_or_flag,
    check_file,
    scenario_files,
    validate_terms,
)

logger = logging.getLogger(__name__)

NAN = float("nan")


@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    results_path: Optional[Path] = None
    cashflows_path: Optional[Path] = None


def _diagnostic(year: Any, price: Any, err: BondCalcError) -> str:
    where = f"exit year {year} and sale price {format_price(float(price))}%"
    if isinstance(err, (NonConvergence, Divergence)):
        head = f"XIRR calculation did not converge for {where}"
    elif isinstance(err, (DegenerateCashFlows, InsufficientData)):
        head = f"Invalid cash flow pattern for {where}"
    else:
        head = f"Calculation error for {where}"
    return f"{head} [{err.kind}]: {err}"


def build_matrix(
    terms: BondTerms,
    exit_years: Iterable[int],
    sale_prices: Iterable[float],
    *,
    recorder: Optional[EventRecorder] = None,
) -> MatrixResult:
    """
    XIRR for every (exit year, sale price) pair.

    Invalid terms or an empty selection give an empty result ("not ready").
    A failing cell holds NaN and adds one diagnostic; other cells still run.
    """
    years = sorted(set(exit_years or ()))
    prices = sorted(set(sale_prices or ()))
    if not years or not prices:
        return MatrixResult()
    problems = validate_terms(terms)
    if problems:
        logger.debug("terms not ready for calculation: %s", "; ".join(problems))
        return MatrixResult()

    matrix: RateMatrix = {}
    diagnostics: List[str] = []
    for year in years:
        row = matrix.setdefault(year, {})
        for price in prices:
            try:
                row[price] = xirr(build(terms, year, price))
            except BondCalcError as e:
                row[price] = NAN
                msg = _diagnostic(year, price, e)
                logger.warning(msg)
                diagnostics.append(msg)

    logger.debug(
        "xirr matrix: %d years x %d prices, %d failed cells",
        len(years), len(prices), len(diagnostics),
    )
    (recorder or NullRecorder()).record(
        AnalyticsEvent(
            BOND_CALCULATION,
            {
                "calculation_type": "xirr_matrix",
                "exit_years_count": len(years),
                "sale_prices_count": len(prices),
                "failed_cells": len(diagnostics),
            },
        )
    )
    return MatrixResult(matrix=matrix, diagnostics=diagnostics)


def _write_jsonl(path: Path, rows: List[Dict[str, Any]]) -> None:
    with path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, default=str) + "\n")


def _write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    if not rows:
        path.write_text("", encoding="utf-8")
        return
    hdr = list(rows[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=hdr)
        w.writeheader()
        w.writerows(rows)


def _write_rows(out: Path, base: str, fmt: str, rows: List[Dict[str, Any]]) -> Path:
    if fmt == "jsonl":
        path = out / f"{base}.jsonl"
        _write_jsonl(path, rows)
    elif fmt == "csv":
        path = out / f"{base}.csv"
        _write_csv(path, rows)
    else:
        raise SystemExit(f"unknown fmt: {fmt}")
    return path


def run_dir(
    config: str | Path | None,
    out_dir: str | Path,
    *,
    fmt: str = "csv",
    save_cashflows: bool = False,
    mode: Optional[str] = None,
    recorder: Optional[EventRecorder] = None,
) -> RunResult:
    """
    Run one scenario file and write ``summary.json`` plus the matrix rows, or
    validate every scenario in a directory.
    """
    from .adapters import cashflow_records, run_xirr
    from .config import DEFAULT_CONFIG

    cfg_path = Path(config) if config else DEFAULT_CONFIG
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    vmode = _mode_from_env_or_flag(mode)

    # Directory mode: validate each scenario file; raise on violations.
    if cfg_path.is_dir():
        files = scenario_files(cfg_path)
        if not files:
            raise ValueError(f"{cfg_path}: no scenario files found")
        for f in files:
            try:
                check_file(f, mode=vmode)
            except SystemExit as e:
                raise SystemExit(f"{f}: {e}")
        summary = {"validated": True, "files": len(files)}
        summary_path = out / "summary.json"
        summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
        return RunResult(summary=summary, summary_path=summary_path)

    params = check_file(cfg_path, mode=vmode)

    summary = run_xirr(params, recorder=recorder)
    summary_path = out / "summary.json"
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")

    results_path = _write_rows(out, f"{cfg_path.stem}_matrix", fmt, summary.get("cells", []))

    cashflows_path: Optional[Path] = None
    if save_cashflows:
        cashflows_path = _write_rows(out, f"{cfg_path.stem}_cashflows", fmt, cashflow_records(params))

    return RunResult(
        summary=summary,
        summary_path=summary_path,
        results_path=results_path,
        cashflows_path=cashflows_path,
    )


def run_matrix(dir_path: str | Path, out_dir: str | Path, pattern: str = "*.yaml", *, fmt: str = "csv"):
    """Run every scenario in a directory, each into its own output folder."""
    d = Path(dir_path)
    o = Path(out_dir)
    o.mkdir(parents=True, exist_ok=True)
    results = {}
    for cfg in sorted(d.glob(pattern)):
        results[cfg.name] = run_dir(cfg, o / cfg.stem, fmt=fmt)
    return results


__all__ = ["RunResult", "build_matrix", "run_dir", "run_matrix"]
