"""Numeric normalisation helpers.

Applied at every arithmetic boundary of the engine, not only on output, so
compounding happens at the same cent precision the report shows and no
NaN/inf can leak from one year into the next.
"""

from __future__ import annotations

import math
from typing import Annotated

from pydantic import AfterValidator

from rentability.core.constants import EPSILON, PCT_MAX, PCT_MIN


def finite(x: float | None, default: float = 0.0) -> float:
    """Return x as float, or default when x is None, NaN or infinite."""
    if x is None:
        return default
    x = float(x)
    return x if math.isfinite(x) else default


def money(x: float | None) -> float:
    """Round a monetary amount to cents. Non-finite -> 0."""
    # + 0.0 turns -0.0 into 0.0 so serialised output is stable
    return round(finite(x), 2) + 0.0


def ratio(x: float | None) -> float:
    """Round a ratio or percentage KPI to 4 decimals. Non-finite -> 0."""
    return round(finite(x), 4) + 0.0


def years(x: float | None) -> float:
    """Round a duration in years to 4 decimals.

    +inf is kept as the "never" marker. NaN and -inf -> 0.
    """
    if x is None or math.isnan(x) or x == -math.inf:
        return 0.0
    if x == math.inf:
        return math.inf
    return round(float(x), 4) + 0.0


def clamp_pct(x: float | None) -> float:
    """Clamp a percentage input to [-100, 1000]. Non-finite -> 0."""
    return min(max(finite(x), PCT_MIN), PCT_MAX)


def clamp_int(x: float | None, lo: int, hi: int) -> int:
    """Floor then clamp an integer-valued input. Non-finite -> lo."""
    if x is None or not math.isfinite(float(x)):
        return lo
    return int(min(max(math.floor(x), lo), hi))


def safe_div(num: float, den: float, eps: float = EPSILON) -> float:
    """num / den, or 0 when |den| < eps."""
    if abs(den) < eps:
        return 0.0
    return num / den


# Structural rounding: any pydantic field typed Money is rounded on construction
Money = Annotated[float, AfterValidator(money)]
Ratio = Annotated[float, AfterValidator(ratio)]
Years = Annotated[float, AfterValidator(years)]
