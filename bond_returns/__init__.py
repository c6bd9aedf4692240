"""Bond return calculator: cost metrics and XIRR scenario matrices."""
from __future__ import annotations

__version__ = "1.0.0"
