"""payroll - Payroll calculation engine.

Scope:
- Gross salary from ordered payment types (gross.py)
- Net-to-gross bisection solver for net-type payments (solver.py)
- Greedy, balance-limited company deductions (deductions.py)
- Per-staff orchestration (engine.py) and company runs (run.py)

Constraints:
- Pure and synchronous - no profile, file or network access
- Tax settings, exemptions and balances are explicit arguments
- Inputs are never modified; balances are settled by the caller

Usage:
    from payrollcalc.sdk.payroll import calculate_payroll, settle_deductions

    result = calculate_payroll(calc_input, tax_settings)
    new_balances = settle_deductions(calc_input.deductions, result.deductions)
"""

from .solver import (
    solve_gross_increment,
    DEFAULT_PRECISION,
    DEFAULT_MAX_ITERATIONS,
    UPPER_BOUND_MULTIPLIER,
)

from .gross import compute_gross, sort_payment_types

from .deductions import allocate_deductions, settle_deductions

from .engine import (
    calculate_payroll,
    PayrollCalculationError,
    TaxSettingsMissingError,
)

from .run import run_payroll, summarize_results

__all__ = [
    # Solver
    "solve_gross_increment",
    "DEFAULT_PRECISION",
    "DEFAULT_MAX_ITERATIONS",
    "UPPER_BOUND_MULTIPLIER",
    # Gross
    "compute_gross",
    "sort_payment_types",
    # Deductions
    "allocate_deductions",
    "settle_deductions",
    # Orchestration
    "calculate_payroll",
    "PayrollCalculationError",
    "TaxSettingsMissingError",
    # Company run
    "run_payroll",
    "summarize_results",
]
