"""Loan amortization calculations.

Monthly annuity schedule (French amortization) with flat borrower insurance,
optional initial deferral, and its aggregation into yearly buckets sized to
the simulation horizon rather than to the loan term.
"""

from __future__ import annotations

from dataclasses import dataclass

from rentability.core.constants import EPSILON, MAX_LOAN_MONTHS
from rentability.core.exceptions import InvalidParameterError
from rentability.core.numeric import clamp_int, clamp_pct, finite, money
from rentability.domain.models.inputs import DeferredType, FinancingAssumptions


@dataclass(frozen=True)
class MonthlyEntry:
    """One month of the loan schedule."""

    month: int
    payment: float    # Principal + interest, insurance excluded
    interest: float
    principal: float
    insurance: float
    balance: float    # Remaining capital after this month


@dataclass(frozen=True)
class LoanYear:
    """Loan flows aggregated over one simulation year."""

    payment: float = 0.0
    insurance: float = 0.0
    interest: float = 0.0
    principal: float = 0.0
    remaining_debt: float = 0.0


def calculate_monthly_payment(
    principal: float,
    annual_rate_pct: float,
    duration_months: int,
) -> float:
    """Calculate monthly loan payment (principal + interest only).

    Args:
        principal: Loan amount in €
        annual_rate_pct: Annual interest rate as percentage (e.g., 3.5 for 3.5%)
        duration_months: Loan term in months

    Returns:
        Monthly payment amount in €, rounded to the cent
    """
    if principal <= 0 or duration_months <= 0:
        return 0.0

    monthly_rate = (annual_rate_pct / 100.0) / 12.0

    if abs(monthly_rate) < EPSILON:
        return money(principal / duration_months)

    # P * r / (1 - (1+r)^-n); stays finite for long terms at high rates
    return money(principal * monthly_rate / (1.0 - (1.0 + monthly_rate) ** -duration_months))


def calculate_insurance(
    principal: float,
    annual_insurance_pct: float,
) -> float:
    """Calculate monthly insurance premium, levied on the initial capital.

    Args:
        principal: Initial loan amount in €
        annual_insurance_pct: Annual insurance rate as percentage

    Returns:
        Monthly insurance amount in €
    """
    if principal <= 0:
        return 0.0
    return money((principal * (annual_insurance_pct / 100.0)) / 12.0)


def generate_amortization_schedule(
    principal: float,
    annual_rate_pct: float,
    duration_months: int,
    annual_insurance_pct: float = 0.0,
    years: int | None = None,
    deferred_months: int = 0,
    deferred_type: DeferredType = DeferredType.NONE,
) -> list[MonthlyEntry]:
    """Generate the monthly loan schedule.

    Args:
        principal: Loan amount in €
        annual_rate_pct: Annual interest rate %
        duration_months: Loan term in months, deferral included
        annual_insurance_pct: Annual insurance rate %
        years: If provided, stop after min(term, years * 12) months
        deferred_months: Length of the initial deferral
        deferred_type: PARTIAL pays interest only, TOTAL capitalises it

    Returns:
        One MonthlyEntry per simulated month; empty for a zero loan.
    """
    if principal <= 0 or duration_months <= 0:
        return []

    n_months = duration_months if years is None else min(duration_months, years * 12)
    monthly_rate = (annual_rate_pct / 100.0) / 12.0
    insurance = calculate_insurance(principal, annual_insurance_pct)

    # At least one amortizing month must remain after the deferral
    deferral = 0
    if deferred_type != DeferredType.NONE:
        deferral = min(max(deferred_months, 0), duration_months - 1)

    schedule: list[MonthlyEntry] = []
    balance = money(principal)
    pmt: float | None = None

    for month in range(1, n_months + 1):
        interest = money(balance * monthly_rate)

        if month <= deferral:
            if deferred_type == DeferredType.TOTAL:
                # Capitalised interest shows as negative amortization
                principal_paid = -interest
                paid = 0.0
                balance = money(balance + interest)
            else:
                principal_paid = 0.0
                paid = interest
        else:
            if pmt is None:
                pmt = calculate_monthly_payment(balance, annual_rate_pct, duration_months - deferral)

            if month == duration_months:
                # Final payment settles residual cents
                principal_paid = balance
            else:
                principal_paid = money(min(pmt - interest, balance))
            paid = money(interest + principal_paid)
            balance = money(balance - principal_paid)

        schedule.append(MonthlyEntry(
            month=month,
            payment=paid,
            interest=interest,
            principal=principal_paid,
            insurance=insurance,
            balance=balance,
        ))

    return schedule


def yearly_loan_buckets(schedule: list[MonthlyEntry], years: int) -> list[LoanYear]:
    """Aggregate a monthly schedule into one bucket per simulation year.

    Output length is always ``years``; years after maturity are all-zero.
    """
    if years < 1:
        raise InvalidParameterError("years", years, "horizon must be at least one year")

    buckets: list[LoanYear] = []
    for year in range(1, years + 1):
        months = schedule[(year - 1) * 12: year * 12]
        if not months:
            buckets.append(LoanYear())
            continue
        buckets.append(LoanYear(
            payment=money(sum(m.payment for m in months)),
            insurance=money(sum(m.insurance for m in months)),
            interest=money(sum(m.interest for m in months)),
            principal=money(sum(m.principal for m in months)),
            remaining_debt=months[-1].balance,
        ))
    return buckets


def amortize(financing: FinancingAssumptions, years: int) -> list[LoanYear]:
    """Normalise the financing assumptions and build the yearly loan buckets."""
    duration = clamp_int(financing.duration, 0, MAX_LOAN_MONTHS)
    schedule = generate_amortization_schedule(
        principal=money(financing.loan_amount),
        annual_rate_pct=clamp_pct(financing.interest_rate),
        duration_months=duration,
        annual_insurance_pct=clamp_pct(financing.insurance_rate),
        years=years,
        deferred_months=clamp_int(financing.deferred_months, 0, duration),
        deferred_type=financing.deferred_type,
    )
    return yearly_loan_buckets(schedule, years)


def remaining_capital_interest(balance: float, annual_rate_pct: float, months: int) -> float:
    """Simple interest accrued on a balance over a number of months."""
    return money(finite(balance) * (annual_rate_pct / 100.0) / 12.0 * months)
