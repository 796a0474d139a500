"""Terminal sale price estimation.

Evaluated once, against the last simulated year.
"""

from __future__ import annotations

from rentability.core.numeric import clamp_pct, finite, money
from rentability.domain.models.inputs import ExitAssumptions, ExitMethod, PropertyContext
from rentability.domain.models.results import YearlyResult


def estimate_exit_price(
    exit: ExitAssumptions,
    context: PropertyContext,
    last_year: YearlyResult,
    hold_years: int,
) -> float:
    """Estimate the resale price at the end of the hold period.

    - capRate: last year's gross revenue capitalised at the target cap rate
    - appreciation: purchase price compounded over the hold period
    - pricePerSqm: target price per m² times surface
    - anything else, or a method without its parameter: purchase price unchanged
    """
    purchase_price = money(context.purchase_price)

    if exit.method == ExitMethod.CAP_RATE and exit.target_cap_rate is not None:
        cap_rate = clamp_pct(exit.target_cap_rate)
        if cap_rate > 0:
            return money(last_year.gross_revenue / (cap_rate / 100.0))

    elif exit.method == ExitMethod.APPRECIATION and exit.annual_appreciation is not None:
        growth = (1.0 + clamp_pct(exit.annual_appreciation) / 100.0) ** hold_years
        return money(purchase_price * growth)

    elif exit.method == ExitMethod.PRICE_PER_SQM and exit.target_price_per_sqm is not None:
        return money(finite(exit.target_price_per_sqm) * finite(context.surface))

    return purchase_price


def exit_parameter_missing(exit: ExitAssumptions) -> bool:
    """True when a method is chosen but its parameter is unusable."""
    if exit.method == ExitMethod.CAP_RATE:
        return exit.target_cap_rate is None or clamp_pct(exit.target_cap_rate) <= 0
    if exit.method == ExitMethod.APPRECIATION:
        return exit.annual_appreciation is None
    if exit.method == ExitMethod.PRICE_PER_SQM:
        return exit.target_price_per_sqm is None
    return False
