"""Core helpers: numeric normalisation, settings, logging and exceptions."""

from .exceptions import (
    ConfigurationError,
    InvalidParameterError,
    NoRootFoundError,
    RentabilityError,
    SimulationError,
)
from .numeric import Money, Ratio, Years, clamp_int, clamp_pct, finite, money, ratio, safe_div, years

__all__ = [
    "Money",
    "Ratio",
    "Years",
    "clamp_int",
    "clamp_pct",
    "finite",
    "money",
    "ratio",
    "safe_div",
    "years",
    # Exceptions
    "RentabilityError",
    "SimulationError",
    "NoRootFoundError",
    "InvalidParameterError",
    "ConfigurationError",
]
