import re
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]  # repo root
IRR = ROOT / "bond_returns" / "finance" / "irr.py"

EXCLUDE_DIRS = {
    ".venv", "venv", ".git", ".pytest_cache", "build",
    "dist", "__pycache__", ".mypy_cache", ".tox", ".eggs"
}


def _skip(p: Path) -> bool:
    parts = set(p.parts)
    if "site-packages" in parts or "dist-packages" in parts:
        return True
    if any(d in parts for d in EXCLUDE_DIRS):
        return True
    return False


def test_only_irr_module_defines_rate_maths():
    hits = []
    for p in (ROOT / "bond_returns").rglob("*.py"):
        if _skip(p) or p == IRR:
            continue
        text = p.read_text(encoding="utf-8", errors="ignore")
        if re.search(r"\bdef\s+x?(irr|npv)\s*\(", text):
            hits.append(str(p))
    assert not hits, f"Found IRR/NPV defs outside finance/irr.py: {hits}"


def test_core_never_imports_presentation_or_io():
    # the numeric core stays pure: no CLI, runner or file handling
    for name in ("costs.py", "cashflow.py", "irr.py"):
        text = (ROOT / "bond_returns" / "finance" / name).read_text(encoding="utf-8")
        for forbidden in ("import yaml", "scenario_runner", "bond_returns.cli", "open("):
            assert forbidden not in text, f"{name} must not use {forbidden!r}"
