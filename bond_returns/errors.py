"""
Error taxonomy for the bond return calculator.

Every failure raised by the numeric core is a ``BondCalcError`` (a
``ValueError``), so callers can catch the whole family in one place. The
``kind`` attribute is the stable label used in per-cell diagnostics.
"""
from __future__ import annotations


class BondCalcError(ValueError):
    kind = "error"


class InvalidInput(BondCalcError):
    """A term or selection violates a static range/sign constraint."""

    kind = "invalid_input"


class ScenarioOutOfRange(BondCalcError):
    """Exit year exceeds what the maturity date allows."""

    kind = "scenario_out_of_range"


class InsufficientData(BondCalcError):
    kind = "insufficient_data"


class DegenerateCashFlows(BondCalcError):
    """No sign change in the cash-flow stream, so no finite root."""

    kind = "degenerate_cashflows"


class NonConvergence(BondCalcError):
    kind = "non_convergence"


class Divergence(BondCalcError):
    """Rate estimate left the sane numeric envelope during iteration."""

    kind = "divergence"


__all__ = [
    "BondCalcError",
    "InvalidInput",
    "ScenarioOutOfRange",
    "InsufficientData",
    "DegenerateCashFlows",
    "NonConvergence",
    "Divergence",
]
