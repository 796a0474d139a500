"""Application services."""

from .compute import ComputeRentabilityRequest, ComputeRentabilityResponse, compute, compute_json
from .kpis import KpiReport, aggregate_kpis, assess_kpis
from .simulation import SimulationRun, calculate, run_simulation, simulate_year

__all__ = [
    "ComputeRentabilityRequest",
    "ComputeRentabilityResponse",
    "KpiReport",
    "SimulationRun",
    "aggregate_kpis",
    "assess_kpis",
    "calculate",
    "compute",
    "compute_json",
    "run_simulation",
    "simulate_year",
]
