"""Simulation input data models.

A RentabilityInput groups the six assumption records filled in by the
scenario wizard. Values are accepted as given; range sanitisation happens
in the engine through ``rentability.core.numeric`` so that a persisted
scenario can always be recomputed.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from rentability.core.constants import (
    DEFAULT_BUILDING_DEPRECIATION_YEARS,
    DEFAULT_FURNITURE_DEPRECIATION_YEARS,
    DEFAULT_SOCIAL_CONTRIBUTIONS_PCT,
)

CONTRACT_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
    "extra": "ignore",
    "ser_json_inf_nan": "constants",
}


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    COMMERCIAL = "commercial"
    PARKING = "parking"
    LAND = "land"


class PropertyState(str, Enum):
    NEW = "new"
    GOOD = "good"
    TO_RENOVATE = "toRenovate"
    RENOVATED = "renovated"


class PropertyStrategy(str, Enum):
    BARE = "bare"
    FURNISHED = "furnished"
    SEASONAL = "seasonal"
    COLIVING = "coliving"
    COMMERCIAL = "commercial"


class InvestmentObjective(str, Enum):
    YIELD = "yield"
    CASHFLOW = "cashflow"
    APPRECIATION = "appreciation"
    TAX_REDUCTION = "taxReduction"


class IndexationMethod(str, Enum):
    IRL = "irl"
    ICC = "icc"
    FIXED = "fixed"


class LoanType(str, Enum):
    FIXED = "fixed"
    VARIABLE = "variable"
    MIXED = "mixed"


class DeferredType(str, Enum):
    NONE = "none"
    PARTIAL = "partial"  # Interest only
    TOTAL = "total"      # Nothing paid, interest capitalised


class ExitMethod(str, Enum):
    CAP_RATE = "capRate"
    APPRECIATION = "appreciation"
    PRICE_PER_SQM = "pricePerSqm"


class PropertyContext(BaseModel):
    """Property description and acquisition costs."""

    type: PropertyType = Field(default=PropertyType.APARTMENT, description="Property type")
    location: str = Field(default="", description="City or address")
    surface: float = Field(default=0.0, description="Surface in m²")
    state: PropertyState = Field(default=PropertyState.GOOD, description="Condition")
    strategy: PropertyStrategy = Field(default=PropertyStrategy.BARE, description="Rental strategy")
    horizon: float = Field(default=10, description="Investment horizon in years")
    objective: InvestmentObjective = Field(default=InvestmentObjective.CASHFLOW, description="Main objective")

    purchase_price: float = Field(..., description="Purchase price in €")
    notary_fees_rate: float | None = Field(None, description="Notary fees as % of price (informational)")
    notary_fees: float = Field(default=0.0, description="Notary fees in €")
    renovation_cost: float = Field(default=0.0, description="Renovation costs in €")
    land_value: float | None = Field(None, description="Non-depreciable land share in €")
    furniture_cost: float | None = Field(None, description="Furniture value in €")

    model_config = CONTRACT_CONFIG


class RevenueAssumptions(BaseModel):
    """Rental income assumptions."""

    monthly_rent: float = Field(..., description="Monthly rent in €")
    indexation: IndexationMethod = Field(default=IndexationMethod.IRL, description="Indexation index")
    indexation_rate: float = Field(default=0.0, description="Annual indexation %")
    vacancy_rate: float = Field(default=0.0, description="Vacancy %")

    seasonality_enabled: bool = Field(default=False, description="Apply high-season multiplier")
    high_season_months: list[int] = Field(default_factory=list, description="Months (1-12) in high season")
    high_season_multiplier: float | None = Field(None, description="Rent multiplier in high season")

    parking_rent: float | None = Field(None, description="Monthly parking rent in €")
    storage_rent: float | None = Field(None, description="Monthly storage rent in €")
    other_revenues: float | None = Field(None, description="Other annual revenues in €")

    guaranteed_rent: bool | None = Field(None, description="Rent guarantee insurance (informational)")
    relocation_increase: float | None = Field(None, description="Rent increase at re-letting % (informational)")

    model_config = CONTRACT_CONFIG


class PlannedCapex(BaseModel):
    """One-off capital expenditure attributed to a simulation year."""

    year: int = Field(..., description="Simulation year (1-indexed)")
    amount: float = Field(..., description="Amount in €")
    description: str = Field(default="", description="Label")

    model_config = CONTRACT_CONFIG


class ChargesAssumptions(BaseModel):
    """Recurring charges, planned CAPEX and their growth."""

    condo_fees: float = Field(default=0.0, description="Monthly condominium fees in €")
    insurance: float = Field(default=0.0, description="Monthly landlord insurance in €")
    property_tax: float = Field(default=0.0, description="Annual property tax in €")
    management_fees: float = Field(default=0.0, description="Management fees % of collected rent")
    maintenance_rate: float = Field(default=0.0, description="Maintenance % of collected rent")
    recoverable_charges: float = Field(default=0.0, description="Monthly charges reimbursed by tenant in €")
    planned_capex: list[PlannedCapex] = Field(default_factory=list, description="Planned CAPEX")
    charges_increase: float = Field(default=0.0, description="Annual charges increase %")

    model_config = CONTRACT_CONFIG


class FinancingAssumptions(BaseModel):
    """Mortgage assumptions."""

    loan_amount: float = Field(default=0.0, description="Borrowed amount in €")
    loan_type: LoanType = Field(default=LoanType.FIXED, description="Rate type")
    interest_rate: float = Field(default=0.0, description="Annual interest rate %")
    duration: float = Field(default=240, description="Loan term in months")
    insurance_rate: float = Field(default=0.0, description="Annual borrower insurance % of initial capital")
    deferred_months: float = Field(default=0, description="Deferral length in months")
    deferred_type: DeferredType = Field(default=DeferredType.NONE, description="Deferral kind")
    early_repayment_penalty: float = Field(default=0.0, description="Early repayment penalty % of remaining debt")
    include_notary_in_loan: bool = Field(default=False, description="Notary fees financed (informational)")
    include_renovation_in_loan: bool = Field(default=False, description="Renovation financed (informational)")

    model_config = CONTRACT_CONFIG


# --- Tax regimes (closed union, discriminated on "regime") ---

class _RegimeBase(BaseModel):
    marginal_tax_rate: float = Field(default=0.0, description="Marginal income tax rate %")
    social_contributions: float = Field(
        default=DEFAULT_SOCIAL_CONTRIBUTIONS_PCT, description="Social contributions %"
    )
    crl_applicable: bool = Field(default=False, description="Rental income contribution applies (informational)")

    model_config = CONTRACT_CONFIG


class MicroRegime(_RegimeBase):
    """Flat 50% abatement on collected revenue."""

    regime: Literal["micro"] = "micro"


class _DeficitRegime(_RegimeBase):
    deficit_carry_forward: bool = Field(default=False, description="Keep negative taxable income")


class RealRegime(_DeficitRegime):
    """Actual charges and interest deducted."""

    regime: Literal["real"] = "real"


class LmpRegime(_DeficitRegime):
    """Professional furnished rental, taxed like the real regime."""

    regime: Literal["lmp"] = "lmp"


class SciRegime(_DeficitRegime):
    """Property company, taxed like the real regime."""

    regime: Literal["sci_is", "sci_ir"] = "sci_is"


class LmnpRegime(_RegimeBase):
    """Non-professional furnished rental with building and furniture depreciation."""

    regime: Literal["lmnp"] = "lmnp"
    depreciation_years: float = Field(
        default=DEFAULT_BUILDING_DEPRECIATION_YEARS, description="Building depreciation period"
    )
    furniture_depreciation_years: float = Field(
        default=DEFAULT_FURNITURE_DEPRECIATION_YEARS, description="Furniture depreciation period"
    )


TaxAssumptions = Annotated[
    Union[MicroRegime, RealRegime, LmnpRegime, LmpRegime, SciRegime],
    Field(discriminator="regime"),
]


class ExitAssumptions(BaseModel):
    """Resale assumptions at the end of the hold period."""

    method: ExitMethod | None = Field(None, description="Valuation method")
    target_cap_rate: float | None = Field(None, description="Exit cap rate %")
    annual_appreciation: float | None = Field(None, description="Annual price appreciation %")
    target_price_per_sqm: float | None = Field(None, description="Exit price per m² in €")
    selling_costs: float = Field(default=0.0, description="Selling costs % of exit price")
    capital_gains_tax: float = Field(default=0.0, description="Capital gains tax % of gain")
    hold_years: float | None = Field(None, description="Hold period in years (defaults to horizon)")

    model_config = CONTRACT_CONFIG


class RentabilityInput(BaseModel):
    """Complete set of assumptions for one simulation."""

    context: PropertyContext
    revenues: RevenueAssumptions
    charges: ChargesAssumptions = Field(default_factory=ChargesAssumptions)
    financing: FinancingAssumptions = Field(default_factory=FinancingAssumptions)
    tax: TaxAssumptions = Field(default_factory=RealRegime)
    exit: ExitAssumptions = Field(default_factory=ExitAssumptions)

    scenario_name: str | None = Field(None, description="Scenario label (pass-through)")
    scenario_id: str | None = Field(None, description="Scenario id (pass-through)")

    model_config = CONTRACT_CONFIG

    @property
    def requested_hold_years(self) -> float:
        """Hold period before clamping: exit.holdYears, else context.horizon."""
        if self.exit.hold_years is not None:
            return self.exit.hold_years
        return self.context.horizon
