"""Financial constants - single source of truth for the engine.

These values are part of the calculation itself. They are deliberately not
configurable through the environment: two calls with the same input must
return the same output on every host.
"""

# Percentage inputs are clamped to this range before use
PCT_MIN = -100.0
PCT_MAX = 1000.0

# Duration bounds
MIN_HOLD_YEARS = 1
MAX_HOLD_YEARS = 60
MAX_LOAN_MONTHS = 1200
MAX_DEPRECIATION_YEARS = 100

# Tax
MICRO_ABATEMENT = 0.5            # Flat 50% abatement (micro-foncier / micro-BIC)
DEFAULT_SOCIAL_CONTRIBUTIONS_PCT = 17.2
DEFAULT_BUILDING_DEPRECIATION_YEARS = 30
DEFAULT_FURNITURE_DEPRECIATION_YEARS = 10

# Exit
EARLY_REPAYMENT_INTEREST_MONTHS = 6  # Legal IRA cap: 6 months of interest

# KPI
NPV_DISCOUNT_RATE = 0.06

# IRR solver
IRR_INITIAL_GUESS = 0.10
IRR_NEWTON_MAX_ITER = 50
IRR_NEWTON_TOL = 1e-10
IRR_BISECTION_LOW = -0.99
IRR_BISECTION_HIGH = 5.0
IRR_BISECTION_MAX_ITER = 100

# Division guard
EPSILON = 1e-12
