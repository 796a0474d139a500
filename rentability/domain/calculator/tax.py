"""Yearly income tax resolution per tax regime.

Pure functions: regime model in, TaxOutcome out. Each year is resolved on
its own; no deficit balance is carried from one year to the next.
"""

from __future__ import annotations

from dataclasses import dataclass

from rentability.core.constants import MAX_DEPRECIATION_YEARS, MICRO_ABATEMENT
from rentability.core.numeric import clamp_int, clamp_pct, finite, money
from rentability.domain.models.inputs import (
    LmnpRegime,
    MicroRegime,
    PropertyContext,
    TaxAssumptions,
)


@dataclass(frozen=True)
class TaxOutcome:
    taxable_income: float
    depreciation: float
    tax: float


def lmnp_depreciation(regime: LmnpRegime, context: PropertyContext) -> float:
    """Annual building + furniture depreciation allowance.

    Building base excludes land; both periods are clamped to 1..100 years.
    """
    building_years = clamp_int(regime.depreciation_years, 1, MAX_DEPRECIATION_YEARS)
    furniture_years = clamp_int(regime.furniture_depreciation_years, 1, MAX_DEPRECIATION_YEARS)

    building_base = max(0.0, finite(context.purchase_price) - finite(context.land_value))
    furniture_base = max(0.0, finite(context.furniture_cost))

    return money(building_base / building_years + furniture_base / furniture_years)


def tax_due(taxable_income: float, marginal_tax_rate: float, social_contributions: float) -> float:
    """Income tax plus social contributions on a positive taxable income."""
    if taxable_income <= 0:
        return 0.0
    rate = clamp_pct(marginal_tax_rate) + clamp_pct(social_contributions)
    return money(taxable_income * rate / 100.0)


def resolve_tax(
    regime: TaxAssumptions,
    net_revenue: float,
    total_charges: float,
    interest: float,
    context: PropertyContext,
) -> TaxOutcome:
    """Compute taxable income, depreciation and tax for one year.

    Args:
        regime: Tax regime with its own parameters
        net_revenue: Collected revenue (gross - vacancy)
        total_charges: Operating charges and CAPEX, interest excluded
        interest: Loan interest paid during the year
        context: Property context (price, land, furniture) for depreciation
    """
    depreciation = 0.0

    if isinstance(regime, MicroRegime):
        # Abatement replaces actual charges and interest
        taxable_income = money(net_revenue * MICRO_ABATEMENT)
    elif isinstance(regime, LmnpRegime):
        depreciation = lmnp_depreciation(regime, context)
        result_before_depreciation = net_revenue - total_charges - interest
        taxable_income = money(max(0.0, result_before_depreciation - depreciation))
    else:
        taxable_income = money(net_revenue - total_charges - interest)
        if not regime.deficit_carry_forward:
            taxable_income = max(0.0, taxable_income)

    tax = tax_due(taxable_income, regime.marginal_tax_rate, regime.social_contributions)
    return TaxOutcome(taxable_income=taxable_income, depreciation=depreciation, tax=tax)
