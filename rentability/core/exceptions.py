"""Exception hierarchy of the rentability engine.

``calculate`` does not raise for a well-typed input: these errors surface
misuse of the lower-level calculators, unsolvable IRR series (handled by
the KPI aggregator) and a malformed environment.
"""

from __future__ import annotations

from typing import Any


class RentabilityError(Exception):
    """Base class of every error raised by the engine."""


# --- Engine errors ---

class SimulationError(RentabilityError):
    """A simulation step was driven outside the hold period."""

    def __init__(self, message: str, year: int | None = None):
        self.year = year
        super().__init__(message)


class InvalidParameterError(RentabilityError):
    """A calculator argument is outside the domain it is defined on.

    ``field`` names the argument, ``constraint`` the rule it breaks.
    """

    def __init__(self, field: str, value: Any, constraint: str):
        self.field = field
        self.value = value
        self.constraint = constraint
        super().__init__(f"{field}={value!r} rejected: {constraint}")


class NoRootFoundError(RentabilityError):
    """The IRR equation has no real root inside the search bracket.

    Some cash-flow series have no IRR at all, e.g. when every flow is
    negative. The KPI aggregator reports those as 0.
    """

    def __init__(self, periods: int, low: float, high: float, f_low: float, f_high: float):
        self.periods = periods
        self.low = low
        self.high = high
        self.f_low = f_low
        self.f_high = f_high
        super().__init__(
            f"No IRR root in [{low}, {high}] for {periods} periods "
            f"(npv(low)={f_low:.2f}, npv(high)={f_high:.2f})"
        )


# --- Environment errors ---

class ConfigurationError(RentabilityError):
    """RENTABILITY_* environment variables failed validation."""
