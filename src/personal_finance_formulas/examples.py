"""
Personal Finance Formulas - Reference Examples

**Version**: 0.4.0
**Status**: Active

Worked examples for every calculator, each with its inputs and the figures a
correct implementation must reproduce. Values were worked out by hand from the
formulas documented in each module.

Structure:
  Calculator       - which calculator an example exercises
  ReferenceExample - inputs, expected outputs and comparison precision

  expected maps an attribute path of the result to its value. Paths are dotted
  and may index sequences: "schedule[11].ending_balance", "totals.payments".
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .debt import ProspectiveLoan, debt_capacity
from .gross_to_net import compute_gross_to_net
from .loan import InsuranceMode, InsurancePolicy, LoanTerms, amortize
from .rate_solver import solve_annual_rate_from_annuity_fv
from .rental import RentalParams, SalePriceMode, TaxRegime, project_rental
from .savings import Periodicity, project_savings
from .vat import compute_vat


# =============================================================================
# ENUMS
# =============================================================================

class Calculator(Enum):
    GROSS_TO_NET = "gross_to_net"
    LOAN = "loan"
    DEBT = "debt"
    SAVINGS = "savings"
    RATE_SOLVER = "rate_solver"
    RENTAL = "rental"
    VAT = "vat"


_PATH_PART = re.compile(r"^(\w+)(?:\[(\d+)\])?$")


def resolve(obj: Any, path: str) -> Any:
    """Follow a dotted attribute path with optional [index] parts."""
    for part in path.split("."):
        match = _PATH_PART.match(part)
        if match is None:
            raise ValueError(f"invalid path segment {part!r} in {path!r}")
        name, index = match.groups()
        obj = getattr(obj, name)
        if index is not None:
            obj = obj[int(index)]
    return obj


# =============================================================================
# REFERENCE EXAMPLE
# =============================================================================

@dataclass
class ReferenceExample:
    """
    One worked example.

    inputs are keyword arguments of the calculator (or of its params dataclass
    for LOAN and RENTAL); places is the assertAlmostEqual precision.
    """
    id: str
    description: str
    calculator: Calculator
    inputs: dict[str, Any]
    expected: dict[str, float] = field(default_factory=dict)
    places: int = 2

    def run(self) -> Any:
        """Run the calculator on the example's inputs."""
        match self.calculator:
            case Calculator.GROSS_TO_NET:
                return compute_gross_to_net(**self.inputs)
            case Calculator.LOAN:
                return amortize(LoanTerms(**self.inputs))
            case Calculator.DEBT:
                return debt_capacity(**self.inputs)
            case Calculator.SAVINGS:
                return project_savings(**self.inputs)
            case Calculator.RATE_SOLVER:
                return solve_annual_rate_from_annuity_fv(**self.inputs)
            case Calculator.RENTAL:
                return project_rental(RentalParams(**self.inputs))
            case Calculator.VAT:
                return compute_vat(**self.inputs)
        raise ValueError(f"unknown calculator {self.calculator}")


# =============================================================================
# EXAMPLES
# =============================================================================

GTN_MONTHLY = ReferenceExample(
    id="GTN-1",
    description="3,000 gross a month over 12 pays, 25% charges, 10% withholding.",
    calculator=Calculator.GROSS_TO_NET,
    inputs=dict(gross_value=3000, input_period="monthly", paid_months=12,
                charges_rate=0.25, withholding_rate=0.10),
    expected={
        "net_before_tax_annual": 27000.0,       # 36,000 × 0.75
        "net_before_tax_monthly_avg": 2250.0,
        "net_after_tax_annual": 24300.0,        # 27,000 × 0.90
        "net_after_tax_monthly_avg": 2025.0,
        "net_per_pay": 2025.0,
    },
)

GTN_ANNUAL_14 = ReferenceExample(
    id="GTN-2",
    description="42,000 gross a year paid over 14 months, 22% charges, no withholding.",
    calculator=Calculator.GROSS_TO_NET,
    inputs=dict(gross_value=42000, input_period="annual", paid_months=14,
                charges_rate=0.22, withholding_rate=0.0),
    expected={
        "net_before_tax_annual": 32760.0,
        "net_before_tax_monthly_avg": 2730.0,
        "net_after_tax_annual": 32760.0,
        "net_per_pay": 2340.0,                  # 42,000 / 14 × 0.78
    },
)

LOAN_ZERO_RATE = ReferenceExample(
    id="LOAN-1",
    description="12,000 at 0% over one year: twelve straight-line payments of 1,000.",
    calculator=Calculator.LOAN,
    inputs=dict(principal=12000, annual_rate=0.0, years=1, payments_per_year=12),
    expected={
        "schedule[0].interest": 0.0,
        "schedule[0].principal": 1000.0,
        "schedule[0].payment": 1000.0,
        "schedule[0].ending_balance": 11000.0,
        "schedule[5].ending_balance": 6000.0,
        "schedule[11].ending_balance": 0.0,
        "totals.interest": 0.0,
        "totals.payments": 12000.0,
        "annual_aggregate[0].principal": 12000.0,
    },
)

LOAN_INITIAL_PCT_INSURANCE = ReferenceExample(
    id="LOAN-2",
    description="100,000 at 3% over 10 years, insurance 0.1% of initial principal.",
    calculator=Calculator.LOAN,
    inputs=dict(principal=100000, annual_rate=0.03, years=10,
                insurance=InsurancePolicy(InsuranceMode.INITIAL_PERCENT_OF_PRINCIPAL, 0.001)),
    expected={
        "schedule[0].interest": 250.0,          # 100,000 × 0.25%
        "schedule[0].insurance": 0.83,          # 100 / 120
        "schedule[119].insurance": 0.83,
        "schedule[119].ending_balance": 0.0,
        "totals.insurance": 100.0,
    },
)

DEBT_NO_RENT = ReferenceExample(
    id="DEBT-1",
    description="3,000 income, 500 existing payments, 35% target, 3% over 20 years.",
    calculator=Calculator.DEBT,
    inputs=dict(net_income=3000, existing_debt=500, charges=0, target_ratio=0.35,
                loan=ProspectiveLoan(annual_rate=0.03, years=20)),
    expected={
        "considered_income": 3000.0,
        "current_ratio": 0.17,
        "max_payment": 550.0,                   # 1,050 - 500
        "projected_ratio": 0.35,
        "stress[0].max_payment": 550.0,
    },
)

SAVINGS_YEARLY_FEE = ReferenceExample(
    id="SAV-1",
    description="5,000 initial, 1,000 a year for 3 years at 8%, 2% entry fee.",
    calculator=Calculator.SAVINGS,
    inputs=dict(initial=5000, periodic=1000, periodicity=Periodicity.YEARLY, years=3,
                gross_annual_return=0.08, entry_fee_rate=0.02),
    expected={
        "series[1].value": 6380.0,              # 5,400 + 980
        "series[2].value": 7870.4,              # 6,890.40 + 980
        "final_capital": 9480.03,               # 8,500.032 + 980
        "total_contributions": 8000.0,
        "gross_gains": 1480.03,
    },
)

RATE_25_YEARS = ReferenceExample(
    id="RATE-1",
    description="175.21 a month for 25 years grows to 115,441.12: about 5.82% a year.",
    calculator=Calculator.RATE_SOLVER,
    inputs=dict(final_capital=115441.12, initial_capital=0.0, monthly_contribution=175.21, years=25),
    expected={"r_annual": 0.0582},
    places=4,
)

RENTAL_FIXED_SALE = ReferenceExample(
    id="RENT-1",
    description=(
        "200,000 flat plus 10,000 costs, 12,000 rent, 3,260 operating costs, "
        "cash purchase sold 250,000 after 5 years with 7% sale costs."
    ),
    calculator=Calculator.RENTAL,
    inputs=dict(price=200000, acq_costs=10000, rent_annual_gross=12000, opex=1000,
                property_tax=800, mgmt_fees_pct=0.08, capex=500, horizon_years=5,
                sale_year=5, sale_price_mode=SalePriceMode.FIXED, sale_price=250000,
                sale_costs_pct=0.07, tax_regime=TaxRegime.NONE),
    expected={
        "annual_table[0].opex_total": 3260.0,   # 1,000 + 800 + 960 + 500
        "annual_table[0].noi": 8740.0,
        "annual_table[0].cashflow": 8740.0,
        "net_sale_proceeds": 232500.0,
        "capital_recovered_at_sale": 232500.0,
        "avg_post_loan_income": 8740.0,
        "cagr": 0.0206,                         # (232,500 / 210,000)^(1/5) - 1
        "saving_effort_irr": 0.0206,            # no effort: same as CAGR
    },
    places=4,
)

RENTAL_MICRO_FONCIER = ReferenceExample(
    id="RENT-2",
    description="Same flat under micro-foncier at 30% TMI and 17.2% social levies.",
    calculator=Calculator.RENTAL,
    inputs=dict(price=200000, acq_costs=10000, rent_annual_gross=12000, opex=1000,
                property_tax=800, mgmt_fees_pct=0.08, capex=500, horizon_years=10,
                sale_year=10, sale_price_mode=SalePriceMode.GROWTH, sale_growth_rate=0.02,
                sale_costs_pct=0.07, tax_regime=TaxRegime.MICRO_FONCIER_30, tmi=0.30, ps=0.172),
    expected={
        "annual_table[0].taxable_income": 8400.0,   # 12,000 × 70%
        "annual_table[0].tax": 3964.8,              # 8,400 × 47.2%
        "annual_table[0].cashflow": 4775.2,         # 8,740 - 3,964.80
    },
)

VAT_EXCL = ReferenceExample(
    id="VAT-1",
    description="100 excluding tax at 20%.",
    calculator=Calculator.VAT,
    inputs=dict(price=100, vat_rate=0.20, price_type="excl"),
    expected={"price_excl_tax": 100.0, "vat_amount": 20.0, "price_incl_tax": 120.0},
)

VAT_INCL = ReferenceExample(
    id="VAT-2",
    description="120 including tax at 20%.",
    calculator=Calculator.VAT,
    inputs=dict(price=120, vat_rate=0.20, price_type="incl"),
    expected={"price_excl_tax": 100.0, "vat_amount": 20.0, "price_incl_tax": 120.0},
)


REFERENCE_EXAMPLES: dict[str, ReferenceExample] = {
    ex.id: ex
    for ex in (
        GTN_MONTHLY,
        GTN_ANNUAL_14,
        LOAN_ZERO_RATE,
        LOAN_INITIAL_PCT_INSURANCE,
        DEBT_NO_RENT,
        SAVINGS_YEARLY_FEE,
        RATE_25_YEARS,
        RENTAL_FIXED_SALE,
        RENTAL_MICRO_FONCIER,
        VAT_EXCL,
        VAT_INCL,
    )
}
