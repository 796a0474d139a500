"""Compute boundary: request in, certified response out.

Wraps ``run_simulation`` with the metadata a caller persists alongside the
results: input sanity warnings, the calculation version, a hash of the
inputs, and whether the client computed with the same version.
"""

from __future__ import annotations

import hashlib
import json
import math
from datetime import datetime

from pydantic import BaseModel, Field

from rentability.core.constants import MAX_HOLD_YEARS, MAX_LOAN_MONTHS, MIN_HOLD_YEARS, PCT_MAX, PCT_MIN
from rentability.core.logging import get_logger
from rentability.core.numeric import clamp_int
from rentability.core.settings import get_settings
from rentability.domain.calculator.exit import exit_parameter_missing
from rentability.domain.models.inputs import CONTRACT_CONFIG, RentabilityInput
from rentability.domain.models.results import RESULT_CONFIG, RentabilityResult

from .kpis import total_investment
from .simulation import run_simulation

log = get_logger(__name__)


class ComputeRentabilityRequest(BaseModel):
    """Inputs plus the calculation version the client used, if any."""

    inputs: RentabilityInput
    client_calc_version: str | None = Field(None, description="Client-side calculation version")

    model_config = CONTRACT_CONFIG


class ComputeRentabilityResponse(BaseModel):
    """Results with their provenance metadata."""

    results: RentabilityResult
    warnings: list[str] = Field(default_factory=list)
    calculation_version: str
    inputs_hash: str
    is_certified: bool

    model_config = RESULT_CONFIG


def inputs_hash(inputs: RentabilityInput) -> str:
    """SHA-256 of the canonical JSON of the inputs (camelCase, sorted keys)."""
    raw = json.dumps(inputs.model_dump(mode="json", by_alias=True), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def _percentage_fields(inputs: RentabilityInput) -> list[tuple[str, float | None]]:
    revenues, charges, financing, exit = inputs.revenues, inputs.charges, inputs.financing, inputs.exit
    return [
        ("revenues.indexationRate", revenues.indexation_rate),
        ("revenues.vacancyRate", revenues.vacancy_rate),
        ("charges.managementFees", charges.management_fees),
        ("charges.maintenanceRate", charges.maintenance_rate),
        ("charges.chargesIncrease", charges.charges_increase),
        ("financing.interestRate", financing.interest_rate),
        ("financing.insuranceRate", financing.insurance_rate),
        ("financing.earlyRepaymentPenalty", financing.early_repayment_penalty),
        ("tax.marginalTaxRate", inputs.tax.marginal_tax_rate),
        ("tax.socialContributions", inputs.tax.social_contributions),
        ("exit.targetCapRate", exit.target_cap_rate),
        ("exit.annualAppreciation", exit.annual_appreciation),
        ("exit.sellingCosts", exit.selling_costs),
        ("exit.capitalGainsTax", exit.capital_gains_tax),
    ]


def collect_warnings(inputs: RentabilityInput, irr_solved: bool = True) -> list[str]:
    """Human-readable notes on values the engine had to adjust or could not solve."""
    warnings: list[str] = []

    for field, value in _percentage_fields(inputs):
        if value is None:
            continue
        if not math.isfinite(value) or not PCT_MIN <= value <= PCT_MAX:
            log.warning("input_clamped", field=field, value=value)
            warnings.append(f"{field} = {value} is outside [{PCT_MIN:g}, {PCT_MAX:g}] % and was clamped")

    requested = inputs.requested_hold_years
    hold_years = clamp_int(requested, MIN_HOLD_YEARS, MAX_HOLD_YEARS)
    if requested != hold_years:
        log.warning("input_clamped", field="holdYears", value=requested)
        warnings.append(f"Hold period {requested} adjusted to {hold_years} years")

    duration = inputs.financing.duration
    if not math.isfinite(duration) or duration > MAX_LOAN_MONTHS:
        log.warning("input_clamped", field="financing.duration", value=duration)
        warnings.append(f"Loan duration {duration} months capped at {MAX_LOAN_MONTHS}")

    if exit_parameter_missing(inputs.exit):
        warnings.append(
            f"Exit method '{inputs.exit.method.value}' has no usable parameter; purchase price used as exit price"
        )

    if inputs.financing.loan_amount > total_investment(inputs.context):
        warnings.append("Loan amount exceeds total investment; own funds are negative")

    if not irr_solved:
        warnings.append("IRR has no solution for this cash-flow series; reported as 0")

    return warnings


def compute(
    request: ComputeRentabilityRequest,
    calculated_at: datetime | None = None,
) -> ComputeRentabilityResponse:
    """Run the simulation and stamp it with version, hash and warnings."""
    settings = get_settings()
    run = run_simulation(request.inputs, calculated_at=calculated_at)

    client_version = request.client_calc_version
    is_certified = client_version is None or client_version == settings.calculation_version
    if not is_certified:
        log.info(
            "calculation_version_mismatch",
            client=client_version,
            server=settings.calculation_version,
        )

    return ComputeRentabilityResponse(
        results=run.result,
        warnings=collect_warnings(request.inputs, run.irr_solved),
        calculation_version=settings.calculation_version,
        inputs_hash=inputs_hash(request.inputs),
        is_certified=is_certified,
    )


def compute_json(document: str | bytes) -> str:
    """JSON request document in, JSON response document out.

    Raises:
        pydantic.ValidationError: if the document does not match the contract.
    """
    request = ComputeRentabilityRequest.model_validate_json(document)
    return compute(request).model_dump_json(by_alias=True)
