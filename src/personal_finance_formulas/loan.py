# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
import warnings
from dataclasses import dataclass, fields
from enum import Enum

import numpy as np

from .utils import round_half_away

__version__ = "0.4.0"


# =============================================================================
# Annuity formulas
# =============================================================================

def annuity_payment(principal: float, periodic_rate: float, periods: int) -> float:
    """
    Level payment that fully amortizes principal over periods at periodic_rate.

    Formula:
        PAYMENT = P · r / [1 - (1 + r)^-n]

    Where:
        P = principal
        r = periodic rate (annual rate / payments per year)
        n = number of payments

    At r = 0 the formula degenerates to straight-line repayment, P / n.

    Raises:
        ValueError: If periods is not positive
    """
    if periods <= 0:
        raise ValueError(f"periods must be positive, got {periods}")
    if periodic_rate == 0:
        return principal / periods
    return principal * periodic_rate / (1.0 - (1.0 + periodic_rate) ** (-periods))


def annuity_principal(payment: float, periodic_rate: float, periods: int) -> float:
    """
    Principal that a level payment can amortize over periods at periodic_rate.

    Inverse of annuity_payment():
        P = PAYMENT · [1 - (1 + r)^-n] / r      (P = PAYMENT · n at r = 0)

    Raises:
        ValueError: If periods is not positive
    """
    if periods <= 0:
        raise ValueError(f"periods must be positive, got {periods}")
    if periodic_rate == 0:
        return payment * periods
    return payment * (1.0 - (1.0 + periodic_rate) ** (-periods)) / periodic_rate


# =============================================================================
# Loan inputs
# =============================================================================

class InsuranceMode(Enum):
    """How borrower insurance is charged each period."""
    INITIAL_PERCENT_OF_PRINCIPAL = "initialPct"   # principal × rate spread evenly over the term
    PERCENT_OF_REMAINING_BALANCE = "crdPct"       # balance before payment × rate, every period


@dataclass(frozen=True)
class InsurancePolicy:
    """Borrower insurance: a mode and a rate as decimal (0.001 = 0.1%)."""
    mode: InsuranceMode
    rate: float

    def __post_init__(self) -> None:
        if not isinstance(self.mode, InsuranceMode):
            object.__setattr__(self, "mode", InsuranceMode(self.mode))
        if self.rate < 0:
            raise ValueError(f"insurance rate must be non-negative, got {self.rate}")

    def premium(self, principal: float, balance: float, total_periods: int) -> float:
        """Insurance due for one period, given the balance before the payment."""
        if self.mode is InsuranceMode.INITIAL_PERCENT_OF_PRINCIPAL:
            return principal * self.rate / total_periods
        return balance * self.rate


@dataclass(frozen=True)
class LoanTerms:
    """
    Fixed-rate, level-payment loan.

    Rates are decimals (0.03 for 3%). payments_per_year defaults to monthly.
    """
    principal: float
    annual_rate: float
    years: int
    payments_per_year: int = 12
    insurance: InsurancePolicy | None = None

    def __post_init__(self) -> None:
        """Validate loan terms."""
        if self.principal < 0:
            raise ValueError(f"principal must be non-negative, got {self.principal}")
        if self.annual_rate < 0:
            raise ValueError(f"annual_rate must be non-negative, got {self.annual_rate}")
        if self.years < 0 or not float(self.years).is_integer():
            raise ValueError(f"years must be a non-negative integer, got {self.years}")
        if self.payments_per_year <= 0 or not float(self.payments_per_year).is_integer():
            raise ValueError(
                f"payments_per_year must be a positive integer, got {self.payments_per_year}"
            )
        object.__setattr__(self, "years", int(self.years))
        object.__setattr__(self, "payments_per_year", int(self.payments_per_year))

    @property
    def periodic_rate(self) -> float:
        return self.annual_rate / self.payments_per_year

    @property
    def total_periods(self) -> int:
        return self.years * self.payments_per_year


# =============================================================================
# Amortization outputs
# =============================================================================

@dataclass(frozen=True)
class AmortizationPeriod:
    """One payment period. All amounts rounded to 2 decimals."""
    period: int              # 1-based
    interest: float
    principal: float
    insurance: float
    payment: float           # level payment + insurance
    ending_balance: float    # outstanding balance (CRD) after the payment


@dataclass
class AnnualAggregate:
    """
    Sums over the periods of one loan year.

    Each sum is re-rounded after every period is added, so it is a running
    total of already-rounded figures (as on a bank's annual statement).
    """
    year: int
    interest: float = 0.0
    principal: float = 0.0
    insurance: float = 0.0
    payment: float = 0.0
    ending_balance: float = 0.0


@dataclass(frozen=True)
class AmortizationTotals:
    """Whole-loan totals, rounded once from the exact per-period sums."""
    interest: float
    insurance: float
    cost: float              # interest + insurance
    payments: float


@dataclass(frozen=True)
class AmortizationResult:
    """Schedule, totals and per-year aggregates of an amortized loan."""
    schedule: tuple[AmortizationPeriod, ...]
    totals: AmortizationTotals
    annual_aggregate: tuple[AnnualAggregate, ...]

    def column(self, name: str) -> np.ndarray:
        """One schedule field as an array, e.g. result.column("ending_balance")."""
        if name not in {f.name for f in fields(AmortizationPeriod)}:
            raise ValueError(f"unknown schedule field {name!r}")
        return np.array([getattr(p, name) for p in self.schedule], dtype=float)

    def aggregate_for_year(self, year: int) -> AnnualAggregate | None:
        """Annual aggregate of loan year `year` (1-based), or None past the term."""
        if 1 <= year <= len(self.annual_aggregate):
            return self.annual_aggregate[year - 1]
        return None


# =============================================================================
# Amortization engine
# =============================================================================

def amortize(terms: LoanTerms) -> AmortizationResult:
    """
    Build the full amortization schedule of a level-payment loan.

    For each period i = 1..n (n = years × payments_per_year, r = annual_rate / payments_per_year):

        INTEREST_i  = BAL_(i-1) × r
        PRINCIPAL_i = PAYMENT - INTEREST_i        (i < n)
        PRINCIPAL_n = BAL_(n-1)                   (last period takes the exact balance)
        BAL_i       = BAL_(i-1) - PRINCIPAL_i

    Forcing the last principal to the remaining balance removes floating-point
    drift so that the schedule ends at exactly 0.00.

    Insurance per period:
        INITIAL_PERCENT_OF_PRINCIPAL: principal × rate / n (constant)
        PERCENT_OF_REMAINING_BALANCE: BAL_(i-1) × rate (decreasing)

    ROUNDING:
    ---------
    - Period fields are rounded to 2 decimals as they are produced; the ending
      balance is reported as round(max(0, BAL_i)).
    - Annual aggregates (year = ceil(i / payments_per_year)) add each exact
      period figure to the already-rounded running sum and round again.
    - Totals accumulate exact figures and are rounded once.

    Args:
        terms: Loan terms

    Returns:
        AmortizationResult with n periods and `years` annual aggregates.
        A zero-year loan returns an empty schedule and zero totals.
    """
    n = terms.total_periods
    if n == 0:
        warnings.warn("loan term is zero, returning empty schedule")
        return AmortizationResult(
            schedule=(),
            totals=AmortizationTotals(interest=0.0, insurance=0.0, cost=0.0, payments=0.0),
            annual_aggregate=(),
        )

    r = terms.periodic_rate
    if r == 0:
        warnings.warn("annual_rate is zero, returning straight-line amortization")
    level_payment = annuity_payment(terms.principal, r, n)

    balance = terms.principal
    schedule: list[AmortizationPeriod] = []
    annual: dict[int, AnnualAggregate] = {}

    total_interest = 0.0
    total_insurance = 0.0
    total_payments = 0.0

    for i in range(1, n + 1):
        interest = balance * r
        principal = level_payment - interest
        if i == n:
            principal = balance

        insurance = 0.0
        if terms.insurance is not None:
            insurance = terms.insurance.premium(terms.principal, balance, n)

        payment = level_payment + insurance
        balance -= principal

        total_interest += interest
        total_insurance += insurance
        total_payments += payment

        row = AmortizationPeriod(
            period=i,
            interest=round_half_away(interest, 2),
            principal=round_half_away(principal, 2),
            insurance=round_half_away(insurance, 2),
            payment=round_half_away(payment, 2),
            ending_balance=round_half_away(max(0.0, balance), 2),
        )
        schedule.append(row)

        year = math.ceil(i / terms.payments_per_year)
        agg = annual.setdefault(year, AnnualAggregate(year=year))
        agg.interest = round_half_away(agg.interest + interest, 2)
        agg.principal = round_half_away(agg.principal + principal, 2)
        agg.insurance = round_half_away(agg.insurance + insurance, 2)
        agg.payment = round_half_away(agg.payment + payment, 2)
        agg.ending_balance = row.ending_balance

    return AmortizationResult(
        schedule=tuple(schedule),
        totals=AmortizationTotals(
            interest=round_half_away(total_interest, 2),
            insurance=round_half_away(total_insurance, 2),
            cost=round_half_away(total_interest + total_insurance, 2),
            payments=round_half_away(total_payments, 2),
        ),
        annual_aggregate=tuple(annual.values()),
    )
