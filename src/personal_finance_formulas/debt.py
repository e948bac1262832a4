# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

from dataclasses import dataclass

from .loan import annuity_payment, annuity_principal
from .utils import round_half_away

__version__ = "0.4.0"

DEFAULT_RENT_RETENTION = 0.7
STRESS_RATE_DELTAS = (0.01, 0.02)
PAYMENTS_PER_YEAR = 12


@dataclass(frozen=True)
class ProspectiveLoan:
    """
    Terms of the loan being sized.

    insurance_rate is a percent of the initial principal (0.003 = 0.3%) spread
    evenly over the term, so the premium grows with the principal being solved.
    """
    annual_rate: float
    years: int
    insurance_rate: float | None = None

    def __post_init__(self) -> None:
        if self.annual_rate < 0:
            raise ValueError(f"annual_rate must be non-negative, got {self.annual_rate}")
        if self.years < 0:
            raise ValueError(f"years must be non-negative, got {self.years}")
        if self.insurance_rate is not None and self.insurance_rate < 0:
            raise ValueError(f"insurance_rate must be non-negative, got {self.insurance_rate}")


@dataclass(frozen=True)
class RentalIncome:
    """Rent expected from the financed property, of which a share is retained by the lender."""
    property_price: float
    rental_yield: float
    rent_retention: float = DEFAULT_RENT_RETENTION


@dataclass(frozen=True)
class StressScenario:
    rate_delta: float
    max_payment: float
    affordable_principal: float


@dataclass(frozen=True)
class DebtCapacityResult:
    """Borrowing capacity. Amounts rounded to 2 decimals, ratios to 2 decimals."""
    estimated_monthly_rent: float
    considered_income: float
    current_ratio: float
    max_payment: float
    affordable_principal: float
    projected_ratio: float
    stress: tuple[StressScenario, ...]


def affordable_principal(
        max_payment: float,
        annual_rate: float,
        years: int,
        insurance_rate: float | None = None
) -> float:
    """
    Largest principal whose monthly payment (insurance included) fits max_payment.

    Without insurance this is the annuity principal:

        P = PAYMENT · [1 - (1 + r)^-n] / r       (PAYMENT · n at r = 0)

    With insurance on the initial principal the premium is itself a function of
    P, so the payment is linear in P and solved directly:

        PAYMENT = P · AF + P · INS / n
        P       = PAYMENT / (AF + INS / n)

    Where:
        AF  = r / [1 - (1 + r)^-n]  (1/n at r = 0)
        INS = insurance_rate
        r   = annual_rate / 12
        n   = years × 12

    Returns:
        Principal rounded to 2 decimals, or 0.0 when max_payment <= 0 or years <= 0
    """
    if max_payment <= 0 or years <= 0:
        return 0.0

    r = annual_rate / PAYMENTS_PER_YEAR
    n = int(years * PAYMENTS_PER_YEAR)

    if insurance_rate:
        factor = annuity_payment(1.0, r, n)
        principal = max_payment / (factor + insurance_rate / n)
    else:
        principal = annuity_principal(max_payment, r, n)
    return round_half_away(principal, 2)


def debt_capacity(
        net_income: float,
        existing_debt: float,
        charges: float,
        target_ratio: float,
        loan: ProspectiveLoan,
        rental: RentalIncome | None = None
) -> DebtCapacityResult:
    """
    Size the loan a household can take on at a target debt-to-income ratio.

    STEPS:
    ------
    1. Estimated rent:   price × yield / 12 (0 without rental data)
    2. Considered income: income + rent × retention - charges
    3. Current ratio:    existing_debt / considered_income (0 if income <= 0)
    4. Max payment:      considered_income × target_ratio - existing_debt
    5. Affordable principal at the loan's rate (see affordable_principal())
    6. Projected ratio:  (existing_debt + max_payment) / considered_income (0 if income <= 0)
    7. Stress test at +1% and +2% annual rate: the max payment depends only on
       income and target ratio, so only the principal is recomputed.

    Non-positive income, a zero target ratio and a zero-year loan are not
    errors; they yield zero ratios and a zero principal.

    Args:
        net_income: Monthly net income
        existing_debt: Monthly payments on existing loans
        charges: Monthly fixed charges deducted from income
        target_ratio: Target debt-to-income ratio as decimal (0.35 = 35%)
        loan: Terms of the loan being sized
        rental: Optional rental income from the financed property

    Returns:
        DebtCapacityResult with two stress scenarios ordered by increasing delta
    """
    estimated_monthly_rent = 0.0
    rent_retention = DEFAULT_RENT_RETENTION
    if rental is not None:
        rent_retention = rental.rent_retention
        if rental.rental_yield and rental.property_price:
            estimated_monthly_rent = round_half_away(rental.property_price * rental.rental_yield / 12, 2)

    considered_income = round_half_away(net_income + estimated_monthly_rent * rent_retention - charges, 2)

    current_ratio = 0.0
    if considered_income > 0:
        current_ratio = round_half_away(existing_debt / considered_income, 2)

    max_payment = round_half_away(considered_income * target_ratio - existing_debt, 2)

    principal = affordable_principal(max_payment, loan.annual_rate, loan.years, loan.insurance_rate)

    projected_ratio = 0.0
    if considered_income > 0:
        projected_ratio = round_half_away((existing_debt + max_payment) / considered_income, 2)

    stress = tuple(
        StressScenario(
            rate_delta=delta,
            max_payment=max_payment,
            affordable_principal=affordable_principal(
                max_payment, loan.annual_rate + delta, loan.years, loan.insurance_rate
            ),
        )
        for delta in STRESS_RATE_DELTAS
    )

    return DebtCapacityResult(
        estimated_monthly_rent=estimated_monthly_rent,
        considered_income=considered_income,
        current_ratio=current_ratio,
        max_payment=max_payment,
        affordable_principal=principal,
        projected_ratio=projected_ratio,
        stress=stress,
    )
