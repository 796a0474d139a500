"""
rentability - Real estate investment rentability simulator

Deterministic multi-year cash-flow simulation of a rental property investment
and the performance indicators derived from it.

Modules:
    - core: Numeric normalisation, settings, logging and exceptions
    - domain: Pydantic data contract and the pure calculators (loan, tax, exit, IRR)
    - application: Yearly simulator, KPI aggregation and the compute boundary
"""

__version__ = "1.4.0"
