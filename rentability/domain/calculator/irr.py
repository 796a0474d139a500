"""IRR, NPV and payback computation.

The IRR solve is scipy's Newton-Raphson from a 10% guess, falling back to
bisection over [-99%, 500%]. A series with no bracketed root raises
NoRootFoundError; turning that into a reported value is the caller's
decision.
"""

from __future__ import annotations

import math
import warnings
from typing import Sequence

import numpy as np
import numpy_financial as npf
from scipy import optimize

from rentability.core.constants import (
    IRR_BISECTION_HIGH,
    IRR_BISECTION_LOW,
    IRR_BISECTION_MAX_ITER,
    IRR_INITIAL_GUESS,
    IRR_NEWTON_MAX_ITER,
    IRR_NEWTON_TOL,
)
from rentability.core.exceptions import NoRootFoundError
from rentability.core.logging import get_logger

log = get_logger(__name__)


def solve_irr(cashflows: Sequence[float]) -> float:
    """Internal rate of return of a yearly cash-flow series, as a fraction.

    cashflows[0] is the entry outlay (t=0), the last entry includes the sale.

    Raises:
        NoRootFoundError: if Newton does not converge and no sign change
            exists in the bisection bracket.
    """
    flows = np.asarray(cashflows, dtype=float)
    periods = np.arange(len(flows), dtype=float)

    def f(rate: float) -> float:
        with np.errstate(all="ignore"):
            return float(np.sum(flows * (1.0 + rate) ** -periods))

    def df(rate: float) -> float:
        with np.errstate(all="ignore"):
            return float(np.sum(-periods * flows * (1.0 + rate) ** (-periods - 1.0)))

    with warnings.catch_warnings():
        # Zero derivative or overflow only mean Newton gave up
        warnings.simplefilter("ignore", RuntimeWarning)
        rate, status = optimize.newton(
            f, IRR_INITIAL_GUESS, fprime=df,
            tol=IRR_NEWTON_TOL, maxiter=IRR_NEWTON_MAX_ITER,
            full_output=True, disp=False,
        )

    rate = float(rate)
    # A rate at or below -100% has no financial meaning
    if status.converged and math.isfinite(rate) and rate > -1.0:
        return rate

    log.debug("irr_newton_diverged", periods=len(flows), flag=status.flag)

    low, high = IRR_BISECTION_LOW, IRR_BISECTION_HIGH
    f_low, f_high = f(low), f(high)
    if not (math.isfinite(f_low) and math.isfinite(f_high)):
        raise NoRootFoundError(len(flows), low, high, f_low, f_high)
    try:
        return float(optimize.bisect(f, low, high, maxiter=IRR_BISECTION_MAX_ITER, disp=False))
    except ValueError as exc:
        raise NoRootFoundError(len(flows), low, high, f_low, f_high) from exc


def npv(rate: float, cashflows: Sequence[float]) -> float:
    """Net present value, first flow undiscounted."""
    if len(cashflows) == 0:
        return 0.0
    return float(npf.npv(rate, list(cashflows)))


def payback_years(outlay: float, cashflows: Sequence[float]) -> float:
    """Years needed for cumulative cash flow to recover the outlay.

    Linear interpolation inside the crossing year. Returns 0 when there is
    nothing to recover and math.inf when the horizon never recovers it.
    """
    if outlay <= 0:
        return 0.0

    position = -outlay
    for year, cf in enumerate(cashflows, start=1):
        previous = position
        position += cf
        if position >= 0:
            return (year - 1) + (-previous / cf)
    return math.inf
