"""Year-by-year rentability simulation.

Drives one year of revenue, operating charges, debt service, tax and cash
flow, then folds that step over the hold period and hands the schedule to
the KPI aggregator.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from functools import reduce

from rentability.core.constants import MAX_HOLD_YEARS, MIN_HOLD_YEARS
from rentability.core.exceptions import SimulationError
from rentability.core.logging import get_logger
from rentability.core.numeric import clamp_int, clamp_pct, finite, money
from rentability.domain.calculator.financial import LoanYear, amortize
from rentability.domain.calculator.tax import resolve_tax
from rentability.domain.models.inputs import RentabilityInput, RevenueAssumptions
from rentability.domain.models.results import RentabilityResult, YearlyResult

from .kpis import assess_kpis

log = get_logger(__name__)


def annual_rent_months(revenues: RevenueAssumptions) -> float:
    """Number of monthly rents collected per year, seasonality included.

    Without seasonality this is 12. With it, every high-season month counts
    for ``highSeasonMultiplier`` rents instead of one.
    """
    if not revenues.seasonality_enabled or revenues.high_season_multiplier is None:
        return 12.0

    multiplier = max(0.0, finite(revenues.high_season_multiplier, default=1.0))
    high_months = {m for m in revenues.high_season_months if 1 <= m <= 12}
    return sum(multiplier if month in high_months else 1.0 for month in range(1, 13))


def resolve_hold_years(inputs: RentabilityInput) -> int:
    """Simulated years: exit.holdYears, else context.horizon, clamped to 1..60."""
    return clamp_int(inputs.requested_hold_years, MIN_HOLD_YEARS, MAX_HOLD_YEARS)


def simulate_year(
    inputs: RentabilityInput,
    year: int,
    loan_year: LoanYear,
    previous_cumulative: float = 0.0,
) -> YearlyResult:
    """Simulate one year of operation.

    Args:
        inputs: Full set of assumptions
        year: Simulation year, 1-indexed
        loan_year: Loan flows for this year
        previous_cumulative: Cumulative after-tax cash flow at the end of year - 1

    Returns:
        The YearlyResult for this year
    """
    if year < 1:
        raise SimulationError(f"Simulation years are 1-indexed, got {year}", year=year)

    revenues = inputs.revenues
    charges = inputs.charges

    # 1. Revenue
    indexation = (1.0 + clamp_pct(revenues.indexation_rate) / 100.0) ** (year - 1)
    rent = finite(revenues.monthly_rent) * annual_rent_months(revenues)
    ancillary = (finite(revenues.parking_rent) + finite(revenues.storage_rent)) * 12.0
    ancillary += finite(revenues.other_revenues)

    gross_revenue = money((rent + ancillary) * indexation)
    vacancy_loss = money(gross_revenue * clamp_pct(revenues.vacancy_rate) / 100.0)
    net_revenue = money(gross_revenue - vacancy_loss)

    # 2. Operating charges
    growth = (1.0 + clamp_pct(charges.charges_increase) / 100.0) ** (year - 1)
    condo_fees = money(finite(charges.condo_fees) * 12.0 * growth)
    insurance = money(finite(charges.insurance) * 12.0 * growth)
    property_tax = money(finite(charges.property_tax) * growth)

    # Fees follow collected rent, not gross rent
    management = money(net_revenue * clamp_pct(charges.management_fees) / 100.0)
    maintenance = money(net_revenue * clamp_pct(charges.maintenance_rate) / 100.0)

    capex = money(sum(finite(item.amount) for item in charges.planned_capex if item.year == year))
    recoverable = money(finite(charges.recoverable_charges) * 12.0)

    total_charges = money(
        condo_fees + insurance + property_tax + management + maintenance + capex - recoverable
    )

    # 3. Debt service and tax
    tax = resolve_tax(inputs.tax, net_revenue, total_charges, loan_year.interest, inputs.context)

    # 4. Cash flow
    cashflow_before_tax = money(
        net_revenue - total_charges - loan_year.payment - loan_year.insurance
    )
    cashflow_after_tax = money(cashflow_before_tax - tax.tax)

    return YearlyResult(
        year=year,
        gross_revenue=gross_revenue,
        net_revenue=net_revenue,
        vacancy_loss=vacancy_loss,
        total_charges=total_charges,
        condo_fees=condo_fees,
        property_tax=property_tax,
        insurance=insurance,
        management=management,
        maintenance=maintenance,
        capex=capex,
        recoverable_charges=recoverable,
        loan_payment=loan_year.payment,
        interest=loan_year.interest,
        principal=loan_year.principal,
        loan_insurance=loan_year.insurance,
        remaining_debt=loan_year.remaining_debt,
        taxable_income=tax.taxable_income,
        depreciation=tax.depreciation,
        tax=tax.tax,
        cashflow_before_tax=cashflow_before_tax,
        cashflow_after_tax=cashflow_after_tax,
        cumulative_cashflow=money(previous_cumulative + cashflow_after_tax),
    )


def simulate_years(inputs: RentabilityInput, hold_years: int) -> list[YearlyResult]:
    """Left fold of simulate_year over years 1..hold_years."""
    loan_years = amortize(inputs.financing, hold_years)

    def step(done: tuple[YearlyResult, ...], loan_year: LoanYear) -> tuple[YearlyResult, ...]:
        previous = done[-1].cumulative_cashflow if done else 0.0
        return done + (simulate_year(inputs, len(done) + 1, loan_year, previous),)

    return list(reduce(step, loan_years, ()))


@dataclass(frozen=True)
class SimulationRun:
    """A result and whether its irr comes from a solved root."""

    result: RentabilityResult
    irr_solved: bool


def run_simulation(
    inputs: RentabilityInput,
    calculated_at: datetime | None = None,
) -> SimulationRun:
    """Run the full simulation and aggregate the KPIs.

    Never raises for a well-typed input: out-of-range values are clamped and
    unsolvable indicators are reported as 0.

    Args:
        inputs: Full set of assumptions
        calculated_at: Timestamp stamped on the result (defaults to now, UTC)
    """
    hold_years = resolve_hold_years(inputs)
    log.debug(
        "simulation_started",
        hold_years=hold_years,
        regime=inputs.tax.regime,
        scenario_id=inputs.scenario_id,
    )

    yearly_results = simulate_years(inputs, hold_years)
    report = assess_kpis(inputs, yearly_results, hold_years)
    kpis = report.kpis

    result = RentabilityResult(
        input=inputs,
        yearly_results=yearly_results,
        kpis=kpis,
        calculated_at=calculated_at or datetime.now(timezone.utc),
    )

    log.debug(
        "simulation_completed",
        hold_years=hold_years,
        irr=kpis.irr,
        irr_solved=report.irr_solved,
        npv=kpis.npv,
        final_equity=kpis.final_equity,
    )
    return SimulationRun(result, report.irr_solved)


def calculate(
    inputs: RentabilityInput,
    calculated_at: datetime | None = None,
) -> RentabilityResult:
    """Simulated schedule and KPIs for one scenario. See run_simulation."""
    return run_simulation(inputs, calculated_at).result
