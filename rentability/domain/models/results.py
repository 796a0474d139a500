"""Simulation result data models.

Results are built once per ``calculate`` call and never mutated. Monetary
fields are typed ``Money`` so they are rounded to cents on construction,
whatever the call site.
"""

from __future__ import annotations

from datetime import datetime

import pandas as pd
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from rentability.core.numeric import Money, Ratio, Years
from rentability.domain.models.inputs import RentabilityInput

RESULT_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
    # Payback can legitimately be infinite; keep it through a JSON round trip
    "ser_json_inf_nan": "constants",
}


class YearlyResult(BaseModel):
    """One simulated year (1-indexed)."""

    year: int

    # Revenue
    gross_revenue: Money = 0.0
    net_revenue: Money = 0.0
    vacancy_loss: Money = 0.0

    # Charges
    total_charges: Money = 0.0
    condo_fees: Money = 0.0
    property_tax: Money = 0.0
    insurance: Money = 0.0
    management: Money = 0.0
    maintenance: Money = 0.0
    capex: Money = 0.0
    recoverable_charges: Money = 0.0

    # Financing
    loan_payment: Money = 0.0
    interest: Money = 0.0
    principal: Money = 0.0
    loan_insurance: Money = 0.0
    remaining_debt: Money = 0.0

    # Tax
    taxable_income: Money = 0.0
    depreciation: Money = 0.0
    tax: Money = 0.0

    # Cash flow
    cashflow_before_tax: Money = 0.0
    cashflow_after_tax: Money = 0.0
    cumulative_cashflow: Money = 0.0

    model_config = RESULT_CONFIG


class GlobalKPIs(BaseModel):
    """Aggregate indicators. Percentages are expressed in %, not fractions."""

    # Initial investment
    total_investment: Money = 0.0
    own_funds: Money = 0.0

    # Yields (%)
    gross_yield: Ratio = 0.0
    net_yield: Ratio = 0.0
    net_net_yield: Ratio = 0.0
    cash_on_cash: Ratio = 0.0

    # Ratios
    cap_rate: Ratio = 0.0
    dscr: Ratio = 0.0
    ltv: Ratio = 0.0

    # IRR (%) and NPV
    irr: Ratio = 0.0
    npv: Money = 0.0

    # Other
    break_even_rent: Money = 0.0
    payback_years: Years = 0.0

    # Exit
    exit_price: Money = 0.0
    capital_gain: Money = 0.0
    net_capital_gain: Money = 0.0
    total_return: Ratio = 0.0
    final_equity: Money = 0.0

    model_config = RESULT_CONFIG


class RentabilityResult(BaseModel):
    """Complete simulation result."""

    input: RentabilityInput
    yearly_results: list[YearlyResult] = Field(default_factory=list)
    kpis: GlobalKPIs = Field(default_factory=GlobalKPIs)
    calculated_at: datetime

    model_config = RESULT_CONFIG

    def to_dataframe(self) -> pd.DataFrame:
        """Yearly schedule as a DataFrame indexed by year, camelCase columns."""
        if not self.yearly_results:
            return pd.DataFrame()
        rows = [y.model_dump(by_alias=True) for y in self.yearly_results]
        return pd.DataFrame(rows).set_index("year")
