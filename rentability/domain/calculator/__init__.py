"""Pure calculators: loan, tax, exit valuation, IRR."""

from .exit import estimate_exit_price
from .financial import (
    LoanYear,
    MonthlyEntry,
    amortize,
    calculate_insurance,
    calculate_monthly_payment,
    generate_amortization_schedule,
    yearly_loan_buckets,
)
from .irr import npv, payback_years, solve_irr
from .tax import TaxOutcome, resolve_tax

__all__ = [
    "LoanYear",
    "MonthlyEntry",
    "TaxOutcome",
    "amortize",
    "calculate_insurance",
    "calculate_monthly_payment",
    "estimate_exit_price",
    "generate_amortization_schedule",
    "npv",
    "payback_years",
    "resolve_tax",
    "solve_irr",
    "yearly_loan_buckets",
]
