# Requires Python 3.12+
"""
Personal Finance Formulas: loan, debt-capacity, savings, rental and pay calculators.

Pure numerical core of a personal-finance calculator suite. Every calculator is
a side-effect-free function over plain numbers returning a frozen dataclass.
"""

from __future__ import annotations

__version__ = "0.4.0"

# Numeric utilities
from personal_finance_formulas.utils import (
    round_half_away,
    clamp,
    round_to_nearest_step,
    Converged,
    Diverged,
    SolverResult,
    newton_irr,
    irr,
)

# Rate solver
from personal_finance_formulas.rate_solver import (
    ConvergenceError,
    AnnuityRateSolution,
    future_value,
    solve_monthly_rate_for_fv,
    monthly_to_annual,
    annual_to_monthly,
    solve_annual_rate_from_annuity_fv,
)

# Loan amortization
from personal_finance_formulas.loan import (
    InsuranceMode,
    InsurancePolicy,
    LoanTerms,
    AmortizationPeriod,
    AnnualAggregate,
    AmortizationTotals,
    AmortizationResult,
    annuity_payment,
    annuity_principal,
    amortize,
)

# Debt capacity
from personal_finance_formulas.debt import (
    ProspectiveLoan,
    RentalIncome,
    StressScenario,
    DebtCapacityResult,
    affordable_principal,
    debt_capacity,
)

# Savings
from personal_finance_formulas.savings import (
    Periodicity,
    SavingsSeriesPoint,
    SavingsProjectionResult,
    project_savings,
)

# Rental investment
from personal_finance_formulas.rental import (
    TaxRegime,
    SalePriceMode,
    RentalLoan,
    RentalParams,
    RentalYearRow,
    RentalProjectionResult,
    compound_annual_growth,
    saving_effort_irr,
    project_rental,
)

# Pay and VAT
from personal_finance_formulas.gross_to_net import GrossToNetResult, compute_gross_to_net
from personal_finance_formulas.vat import VatBreakdown, compute_vat

# Form defaults
from personal_finance_formulas.settings import DefaultSettings, load_settings, save_settings

# Reference examples
from personal_finance_formulas.examples import (
    Calculator,
    ReferenceExample,
    REFERENCE_EXAMPLES,
)

__all__ = [
    "__version__",
    # Utilities
    "round_half_away",
    "clamp",
    "round_to_nearest_step",
    "Converged",
    "Diverged",
    "SolverResult",
    "newton_irr",
    "irr",
    # Rate solver
    "ConvergenceError",
    "AnnuityRateSolution",
    "future_value",
    "solve_monthly_rate_for_fv",
    "monthly_to_annual",
    "annual_to_monthly",
    "solve_annual_rate_from_annuity_fv",
    # Loan
    "InsuranceMode",
    "InsurancePolicy",
    "LoanTerms",
    "AmortizationPeriod",
    "AnnualAggregate",
    "AmortizationTotals",
    "AmortizationResult",
    "annuity_payment",
    "annuity_principal",
    "amortize",
    # Debt
    "ProspectiveLoan",
    "RentalIncome",
    "StressScenario",
    "DebtCapacityResult",
    "affordable_principal",
    "debt_capacity",
    # Savings
    "Periodicity",
    "SavingsSeriesPoint",
    "SavingsProjectionResult",
    "project_savings",
    # Rental
    "TaxRegime",
    "SalePriceMode",
    "RentalLoan",
    "RentalParams",
    "RentalYearRow",
    "RentalProjectionResult",
    "compound_annual_growth",
    "saving_effort_irr",
    "project_rental",
    # Pay and VAT
    "GrossToNetResult",
    "compute_gross_to_net",
    "VatBreakdown",
    "compute_vat",
    # Settings
    "DefaultSettings",
    "load_settings",
    "save_settings",
    # Examples
    "Calculator",
    "ReferenceExample",
    "REFERENCE_EXAMPLES",
]
