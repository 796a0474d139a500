"""Pytest fixtures for rentability tests."""

import os
import sys
from datetime import datetime, timezone

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rentability.core.logging import configure_logging  # noqa: E402
from rentability.core.settings import get_settings  # noqa: E402
from rentability.domain.models import RentabilityInput  # noqa: E402


FIXED_TIME = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

configure_logging()


@pytest.fixture
def base_input_data():
    """Standard 10-year scenario as a camelCase document.

    €200,000 purchase in Nice, €160,000 loan at 3% over 20 years,
    €1,000/month rent with 5% vacancy, real regime.
    """
    return {
        "scenarioName": "T2 Nice",
        "context": {
            "type": "apartment",
            "location": "Nice",
            "surface": 40.0,
            "state": "good",
            "strategy": "bare",
            "horizon": 10,
            "objective": "cashflow",
            "purchasePrice": 200000.0,
            "notaryFees": 15000.0,
            "renovationCost": 10000.0,
            "landValue": 20000.0,
            "furnitureCost": 5000.0,
        },
        "revenues": {
            "monthlyRent": 1000.0,
            "indexation": "irl",
            "indexationRate": 2.0,
            "vacancyRate": 5.0,
            "seasonalityEnabled": False,
        },
        "charges": {
            "condoFees": 100.0,
            "insurance": 20.0,
            "propertyTax": 1200.0,
            "managementFees": 7.0,
            "maintenanceRate": 1.0,
            "recoverableCharges": 0.0,
            "plannedCapex": [],
            "chargesIncrease": 0.0,
        },
        "financing": {
            "loanAmount": 160000.0,
            "loanType": "fixed",
            "interestRate": 3.0,
            "duration": 240,
            "insuranceRate": 0.3,
            "deferredMonths": 0,
            "deferredType": "none",
            "earlyRepaymentPenalty": 0.0,
        },
        "tax": {
            "regime": "real",
            "marginalTaxRate": 30.0,
            "socialContributions": 17.2,
            "deficitCarryForward": True,
        },
        "exit": {
            "method": "appreciation",
            "annualAppreciation": 2.0,
            "sellingCosts": 8.0,
            "capitalGainsTax": 19.0,
            "holdYears": 10,
        },
    }


@pytest.fixture
def base_input(base_input_data):
    """Standard scenario as a RentabilityInput."""
    return RentabilityInput.model_validate(base_input_data)


@pytest.fixture
def make_input(base_input_data):
    """Build a variant of the standard scenario.

    Usage: make_input(revenues={"vacancyRate": 100}, exit={"holdYears": 5})
    """
    def _make(**overrides):
        data = {k: (dict(v) if isinstance(v, dict) else v) for k, v in base_input_data.items()}
        for section, values in overrides.items():
            if isinstance(values, dict) and isinstance(data.get(section), dict):
                data[section].update(values)
            else:
                data[section] = values
        return RentabilityInput.model_validate(data)

    return _make


@pytest.fixture
def fixed_time():
    """Deterministic calculation timestamp."""
    return FIXED_TIME


@pytest.fixture
def clean_settings():
    """Reset cached settings around a test that changes the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
