"""Data models for rentability."""

from .inputs import (
    ChargesAssumptions,
    DeferredType,
    ExitAssumptions,
    ExitMethod,
    FinancingAssumptions,
    LmnpRegime,
    LmpRegime,
    MicroRegime,
    PlannedCapex,
    PropertyContext,
    RealRegime,
    RentabilityInput,
    RevenueAssumptions,
    SciRegime,
    TaxAssumptions,
)
from .results import GlobalKPIs, RentabilityResult, YearlyResult

__all__ = [
    "ChargesAssumptions",
    "DeferredType",
    "ExitAssumptions",
    "ExitMethod",
    "FinancingAssumptions",
    "GlobalKPIs",
    "LmnpRegime",
    "LmpRegime",
    "MicroRegime",
    "PlannedCapex",
    "PropertyContext",
    "RealRegime",
    "RentabilityInput",
    "RentabilityResult",
    "RevenueAssumptions",
    "SciRegime",
    "TaxAssumptions",
    "YearlyResult",
]
