"""Global KPI aggregation.

Builds the GlobalKPIs record from the simulated schedule: entry ratios read
year 1, exit figures read the last simulated year, IRR and NPV run on the
equity cash-flow vector (entry outlay, yearly after-tax cash flows, net sale
proceeds added to the last year).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from rentability.core.constants import EARLY_REPAYMENT_INTEREST_MONTHS, NPV_DISCOUNT_RATE
from rentability.core.exceptions import NoRootFoundError
from rentability.core.logging import get_logger
from rentability.core.numeric import clamp_pct, finite, money, safe_div, years
from rentability.domain.calculator.exit import estimate_exit_price
from rentability.domain.calculator.financial import remaining_capital_interest
from rentability.domain.calculator.irr import npv, payback_years, solve_irr
from rentability.domain.models.inputs import PropertyContext, RentabilityInput
from rentability.domain.models.results import GlobalKPIs, YearlyResult

log = get_logger(__name__)


@dataclass(frozen=True)
class ExitBreakdown:
    """Terminal sale, from price to net proceeds."""

    exit_price: float
    selling_costs: float
    capital_gain: float
    capital_gains_tax: float
    remaining_debt: float
    early_repayment_penalty: float
    terminal_net: float


def total_investment(context: PropertyContext) -> float:
    """Purchase price + notary fees + renovation + furniture."""
    return money(
        finite(context.purchase_price)
        + finite(context.notary_fees)
        + finite(context.renovation_cost)
        + finite(context.furniture_cost)
    )


def early_repayment_penalty(inputs: RentabilityInput, remaining_debt: float) -> float:
    """Penalty owed when the loan is repaid at sale.

    Capped at six months of interest on the outstanding capital.
    """
    if remaining_debt <= 0:
        return 0.0
    financing = inputs.financing
    pct_fee = remaining_debt * max(0.0, clamp_pct(financing.early_repayment_penalty)) / 100.0
    interest_cap = remaining_capital_interest(
        remaining_debt, clamp_pct(financing.interest_rate), EARLY_REPAYMENT_INTEREST_MONTHS
    )
    return money(max(0.0, min(pct_fee, interest_cap)))


def exit_breakdown(
    inputs: RentabilityInput,
    last_year: YearlyResult,
    hold_years: int,
) -> ExitBreakdown:
    """Sale price, costs, taxes and debt settlement at the end of the hold."""
    exit = inputs.exit
    purchase_price = money(inputs.context.purchase_price)

    exit_price = estimate_exit_price(exit, inputs.context, last_year, hold_years)
    selling_costs = money(exit_price * clamp_pct(exit.selling_costs) / 100.0)
    capital_gain = money(exit_price - purchase_price)
    capital_gains_tax = money(max(0.0, capital_gain) * clamp_pct(exit.capital_gains_tax) / 100.0)
    remaining_debt = last_year.remaining_debt
    penalty = early_repayment_penalty(inputs, remaining_debt)

    return ExitBreakdown(
        exit_price=exit_price,
        selling_costs=selling_costs,
        capital_gain=capital_gain,
        capital_gains_tax=capital_gains_tax,
        remaining_debt=remaining_debt,
        early_repayment_penalty=penalty,
        terminal_net=money(exit_price - selling_costs - capital_gains_tax - remaining_debt - penalty),
    )


def build_cashflow_vector(
    own_funds: float,
    yearly_results: Sequence[YearlyResult],
    terminal_net: float,
) -> list[float]:
    """Equity cash flows for IRR/NPV.

    Index 0 is the entry outlay, never an inflow even when the loan exceeds
    the investment. The last year also receives the net sale proceeds.
    """
    flows = [-max(0.0, own_funds)] + [y.cashflow_after_tax for y in yearly_results]
    if yearly_results:
        flows[-1] = money(flows[-1] + terminal_net)
    return flows


def irr_percent(cashflows: Sequence[float]) -> float | None:
    """IRR in %, or None when the series has no real root."""
    try:
        rate = solve_irr(cashflows)
    except NoRootFoundError as exc:
        log.info("irr_no_root", periods=exc.periods, f_low=exc.f_low, f_high=exc.f_high)
        return None
    return rate * 100.0


def _reported(value: float | None) -> float:
    # Unsolvable or non-finite indicators are reported as 0
    if value is None or not math.isfinite(value):
        return 0.0
    return value


@dataclass(frozen=True)
class KpiReport:
    """GlobalKPIs plus whether the IRR solve found a root."""

    kpis: GlobalKPIs
    irr_solved: bool = True


def assess_kpis(
    inputs: RentabilityInput,
    yearly_results: Sequence[YearlyResult],
    hold_years: int,
) -> KpiReport:
    """Assemble the global indicator set.

    Args:
        inputs: Full set of assumptions
        yearly_results: Simulated schedule, years 1..hold_years
        hold_years: Clamped hold period

    Returns:
        KpiReport whose kpis carry irr and npv sanitised to finite values.
        irr_solved is False when the irr of 0 stands for a missing root.
    """
    if not yearly_results:
        return KpiReport(GlobalKPIs())

    context = inputs.context
    first = yearly_results[0]
    last = yearly_results[-1]

    investment = total_investment(context)
    loan_amount = money(inputs.financing.loan_amount)
    own_funds = money(investment - loan_amount)

    # Year-1 ratios
    gross_yield = safe_div(first.gross_revenue, investment) * 100.0
    net_yield = safe_div(first.net_revenue, investment) * 100.0
    net_net_yield = safe_div(
        first.net_revenue - first.total_charges - first.loan_insurance, investment
    ) * 100.0
    cash_on_cash = safe_div(first.cashflow_after_tax, own_funds) * 100.0

    operating_charges = (
        first.condo_fees
        + first.insurance
        + first.property_tax
        + first.management
        + first.maintenance
        - first.recoverable_charges
    )
    noi = first.net_revenue - operating_charges
    dscr = safe_div(noi, first.loan_payment + first.loan_insurance)
    ltv = safe_div(loan_amount, money(context.purchase_price)) * 100.0

    break_even_rent = money(
        (first.total_charges + first.loan_payment + first.loan_insurance + first.tax) / 12.0
    )

    # Exit and equity cash flows
    sale = exit_breakdown(inputs, last, hold_years)
    flows = build_cashflow_vector(own_funds, yearly_results, sale.terminal_net)

    raw_irr = irr_percent(flows)
    irr = _reported(raw_irr)
    net_present_value = _reported(npv(NPV_DISCOUNT_RATE, flows))
    payback = payback_years(own_funds, [y.cashflow_after_tax for y in yearly_results])

    final_equity = money(sum(y.cashflow_after_tax for y in yearly_results) + sale.terminal_net)
    total_return = safe_div(final_equity - own_funds, own_funds) * 100.0

    kpis = GlobalKPIs(
        total_investment=investment,
        own_funds=own_funds,
        gross_yield=gross_yield,
        net_yield=net_yield,
        net_net_yield=net_net_yield,
        cash_on_cash=cash_on_cash,
        cap_rate=gross_yield,
        dscr=dscr,
        ltv=ltv,
        irr=irr,
        npv=net_present_value,
        break_even_rent=break_even_rent,
        payback_years=years(payback),
        exit_price=sale.exit_price,
        capital_gain=sale.capital_gain,
        net_capital_gain=money(sale.capital_gain - sale.capital_gains_tax),
        total_return=total_return,
        final_equity=final_equity,
    )
    return KpiReport(kpis, irr_solved=raw_irr is not None)


def aggregate_kpis(
    inputs: RentabilityInput,
    yearly_results: Sequence[YearlyResult],
    hold_years: int,
) -> GlobalKPIs:
    """GlobalKPIs for a simulated schedule."""
    return assess_kpis(inputs, yearly_results, hold_years).kpis
