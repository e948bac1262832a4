# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .loan import AmortizationResult, InsurancePolicy, LoanTerms, amortize
from .utils import irr, round_half_away

__version__ = "0.4.0"

# Newton seed for the monthly saving-effort flows (irr()'s 0.1 default diverges on them)
SAVING_EFFORT_IRR_GUESS = 0.0


# =============================================================================
# Inputs
# =============================================================================

class TaxRegime(Enum):
    """Income tax treatment of the rent (French regimes)."""
    NONE = "none"
    MICRO_FONCIER_30 = "micro_foncier_30"     # unfurnished, 30% flat allowance
    MICRO_BIC_50 = "micro_bic_50"             # furnished, 50% flat allowance
    EFFECTIVE_RATE = "effective_rate"         # real regime: NOI less loan interest


class SalePriceMode(Enum):
    FIXED = "fixed"
    GROWTH = "growth"


# Share of gross rent that remains taxable under the flat-allowance regimes
TAXABLE_SHARE = {
    TaxRegime.MICRO_FONCIER_30: 0.70,
    TaxRegime.MICRO_BIC_50: 0.50,
}


@dataclass(frozen=True)
class RentalLoan:
    """Acquisition loan; amortized with loan.amortize() on a monthly schedule."""
    amount: float
    annual_rate: float
    years: int
    insurance: InsurancePolicy | None = None

    def terms(self) -> LoanTerms:
        return LoanTerms(
            principal=self.amount,
            annual_rate=self.annual_rate,
            years=self.years,
            insurance=self.insurance,
        )


@dataclass(frozen=True)
class RentalParams:
    """
    Rental investment assumptions. Amounts are annual, rates are decimals.

    Required fields:
        price, rent_annual_gross, opex, property_tax, capex, horizon_years,
        sale_year, sale_price_mode, tax_regime.

    sale_price is required in FIXED mode; sale_growth_rate is used in GROWTH
    mode (price × (1 + g)^sale_year). tmi and ps (marginal income tax and social
    levies) apply to every regime but NONE.
    """
    price: float
    rent_annual_gross: float
    opex: float
    property_tax: float
    capex: float
    horizon_years: int
    sale_year: int
    sale_price_mode: SalePriceMode
    tax_regime: TaxRegime
    acq_costs: float = 0.0
    mgmt_fees_pct: float = 0.0
    sale_price: float | None = None
    sale_growth_rate: float = 0.0
    sale_costs_pct: float = 0.0
    loan: RentalLoan | None = None
    tmi: float = 0.0
    ps: float = 0.0

    def __post_init__(self) -> None:
        """Validate inputs and coerce string modes to their enums."""
        object.__setattr__(self, "sale_price_mode", SalePriceMode(self.sale_price_mode))
        object.__setattr__(self, "tax_regime", TaxRegime(self.tax_regime))
        for name in ("price", "acq_costs", "rent_annual_gross", "opex", "property_tax", "capex"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.horizon_years < 0:
            raise ValueError(f"horizon_years must be non-negative, got {self.horizon_years}")
        if self.sale_year < 0:
            raise ValueError(f"sale_year must be non-negative, got {self.sale_year}")
        if self.sale_price_mode is SalePriceMode.FIXED and self.sale_price is None:
            raise ValueError("sale_price is required when sale_price_mode is FIXED")
        if not 0 <= self.sale_costs_pct <= 1:
            raise ValueError(f"sale_costs_pct must be within [0, 1], got {self.sale_costs_pct}")

    @property
    def loan_years(self) -> int:
        return self.loan.years if self.loan is not None else 0

    @property
    def loan_amount(self) -> float:
        return self.loan.amount if self.loan is not None else 0.0


# =============================================================================
# Outputs
# =============================================================================

@dataclass(frozen=True)
class RentalYearRow:
    """One projection year. Amounts rounded to 2 decimals."""
    year: int
    rent_gross: float
    rent_net: float          # equal to rent_gross: no vacancy deduction
    opex_total: float        # opex + property tax + management fees + capex
    noi: float               # net operating income
    interest: float
    principal: float
    insurance: float
    annuity: float           # loan payments of the year, insurance included
    taxable_income: float
    tax: float
    cashflow: float          # noi - annuity - tax
    ending_balance: float    # outstanding loan balance at year end


@dataclass(frozen=True)
class RentalProjectionResult:
    annual_table: tuple[RentalYearRow, ...]
    avg_saving_effort_during_loan: float
    avg_post_loan_income: float
    cagr: float
    saving_effort_irr: float
    sale_price: float
    net_sale_proceeds: float
    balance_at_sale: float
    capital_recovered_at_sale: float

    def cashflows(self) -> np.ndarray:
        return np.array([row.cashflow for row in self.annual_table], dtype=float)


# =============================================================================
# Projection
# =============================================================================

def _tax(regime: TaxRegime, rent_gross: float, noi: float, interest: float,
         marginal_rate: float) -> tuple[float, float]:
    """Taxable income and tax for one year."""
    if regime is TaxRegime.NONE:
        return 0.0, 0.0
    if regime is TaxRegime.EFFECTIVE_RATE:
        taxable = max(0.0, noi - interest)
    else:
        taxable = rent_gross * TAXABLE_SHARE[regime]
    return taxable, taxable * marginal_rate


def compound_annual_growth(recovered: float, invested: float, years: int) -> float:
    """
    CAGR of recovered capital over invested capital.

        CAGR = (recovered / invested)^(1 / years) - 1

    Degenerate cases are policy, not arithmetic accidents:
        years == 0                          -> 0
        invested > 0 and recovered <= 0     -> -1 (total loss)
        invested == 0 and recovered > 0     -> +inf
        invested < 0 and recovered > 0      -> -1 (negative base)
        invested <= 0 and recovered == 0    -> 0
        invested <= 0 and recovered < 0     -> -1
    """
    if years == 0:
        return 0.0
    if invested > 0:
        if recovered <= 0:
            return -1.0
        return (recovered / invested) ** (1.0 / years) - 1.0
    if recovered > 0:
        return math.inf if invested == 0 else -1.0
    if recovered == 0:
        return 0.0
    return -1.0


def saving_effort_irr(initial_equity: float, avg_saving_effort: float,
                      capital_recovered: float, horizon_years: int) -> float:
    """
    Annualized IRR of the investor's own money.

    Monthly cash flows: the unfinanced equity at t = 0, then the average annual
    saving effort spread over every month of the horizon, with the capital
    recovered at sale added to the last month:

        CF_0 = -EQUITY
        CF_t = -EFFORT / 12                       t = 1..12·H
        CF_12H += RECOVERED

    The monthly IRR m is annualized as (1 + m)^12 - 1. Newton starts from
    SAVING_EFFORT_IRR_GUESS (0) rather than irr()'s 0.1 default, so some flows
    that give NaN from a 0.1 seed converge here.

    Returns:
        Annual IRR; -1 when money was put in and nothing (or a loss) came back,
        or when the monthly IRR is at or below -100%; NaN when nothing was put
        in but capital came back, when Newton–Raphson does not converge, or when
        the horizon is zero
    """
    if horizon_years == 0:
        return math.nan

    invested = initial_equity > 0 or avg_saving_effort > 0
    if invested and capital_recovered != 0:
        months = horizon_years * 12
        flows = np.full(months + 1, -avg_saving_effort / 12)
        flows[0] = -initial_equity
        flows[months] = round_half_away(flows[months] + capital_recovered, 2)

        monthly = irr(flows, guess=SAVING_EFFORT_IRR_GUESS)
        if math.isnan(monthly):
            return math.nan
        if monthly <= -1:
            return -1.0
        return (1.0 + monthly) ** 12 - 1.0
    if invested and capital_recovered <= 0:
        return -1.0
    return math.nan


def project_rental(params: RentalParams) -> RentalProjectionResult:
    """
    Year-by-year cash flow of a rental investment, with sale and return metrics.

    For each year y = 1..horizon_years:

        OPEX_TOTAL = opex + property_tax + rent × mgmt_fees_pct + capex
        NOI        = rent - OPEX_TOTAL              (gross rent, no vacancy)
        TAX        = regime-dependent (see TaxRegime)
        CASHFLOW   = NOI - ANNUITY - TAX

    Loan interest, principal, insurance, annuity and year-end balance come from
    the amortization schedule's annual aggregate for years within the loan term.

    The sale happens at y == sale_year (which may be before the horizon; a
    sale year past the horizon means no sale):

        SALE_PRICE = sale_price                       (FIXED)
                   = price × (1 + growth)^sale_year   (GROWTH)
        NET        = SALE_PRICE × (1 - sale_costs_pct)
        RECOVERED  = NET - BALANCE_AT_SALE

    Derived figures:
        avg_saving_effort_during_loan: mean of max(0, -CASHFLOW) over loan years
        avg_post_loan_income: mean CASHFLOW over the years after the loan
        cagr: compound_annual_growth(RECOVERED, EQUITY + Σ max(0, -CASHFLOW), H)
              with EQUITY = price + acq_costs - loan amount, rounded to 4 decimals
        saving_effort_irr: see saving_effort_irr(), rounded to 4 decimals

    Args:
        params: Rental assumptions

    Returns:
        RentalProjectionResult with horizon_years rows
    """
    p = params
    schedule: AmortizationResult | None = amortize(p.loan.terms()) if p.loan is not None else None
    marginal_rate = p.tmi + p.ps

    rows: list[RentalYearRow] = []
    effort_during_loan: list[float] = []
    post_loan_cashflows: list[float] = []

    sale_price = 0.0
    net_sale_proceeds = 0.0
    balance_at_sale = 0.0
    capital_recovered = 0.0

    for year in range(1, p.horizon_years + 1):
        rent_gross = p.rent_annual_gross
        rent_net = rent_gross
        opex_total = p.opex + p.property_tax + rent_gross * p.mgmt_fees_pct + p.capex
        noi = rent_net - opex_total

        interest = principal = insurance = annuity = ending_balance = 0.0
        if schedule is not None and year <= p.loan_years:
            agg = schedule.aggregate_for_year(year)
            if agg is not None:
                interest = agg.interest
                principal = agg.principal
                insurance = agg.insurance
                annuity = agg.payment
                ending_balance = agg.ending_balance

        taxable_income, tax = _tax(p.tax_regime, rent_gross, noi, interest, marginal_rate)
        tax = round_half_away(tax, 2)
        cashflow = round_half_away(noi - annuity - tax, 2)

        rows.append(RentalYearRow(
            year=year,
            rent_gross=round_half_away(rent_gross, 2),
            rent_net=round_half_away(rent_net, 2),
            opex_total=round_half_away(opex_total, 2),
            noi=round_half_away(noi, 2),
            interest=round_half_away(interest, 2),
            principal=round_half_away(principal, 2),
            insurance=round_half_away(insurance, 2),
            annuity=round_half_away(annuity, 2),
            taxable_income=round_half_away(taxable_income, 2),
            tax=tax,
            cashflow=cashflow,
            ending_balance=round_half_away(ending_balance, 2),
        ))

        if p.loan is not None and year <= p.loan_years:
            effort_during_loan.append(max(0.0, -cashflow))
        else:
            post_loan_cashflows.append(cashflow)

        if year == p.sale_year:
            if p.sale_price_mode is SalePriceMode.FIXED:
                gross_sale_price = p.sale_price
            else:
                gross_sale_price = p.price * (1.0 + p.sale_growth_rate) ** p.sale_year
            net_sale_proceeds = round_half_away(gross_sale_price * (1.0 - p.sale_costs_pct), 2)
            balance_at_sale = round_half_away(ending_balance, 2)
            capital_recovered = round_half_away(net_sale_proceeds - balance_at_sale, 2)
            sale_price = round_half_away(gross_sale_price, 2)

    avg_effort = 0.0
    if effort_during_loan:
        avg_effort = round_half_away(sum(effort_during_loan) / len(effort_during_loan), 2)
    avg_post_loan = 0.0
    if post_loan_cashflows:
        avg_post_loan = round_half_away(sum(post_loan_cashflows) / len(post_loan_cashflows), 2)

    initial_equity = round_half_away(p.price + p.acq_costs - p.loan_amount, 2)
    cashflows = np.array([row.cashflow for row in rows], dtype=float)
    total_invested = initial_equity + float(np.sum(np.maximum(0.0, -cashflows)))

    cagr = compound_annual_growth(capital_recovered, total_invested, p.horizon_years)
    effort_irr = saving_effort_irr(initial_equity, avg_effort, capital_recovered, p.horizon_years)

    return RentalProjectionResult(
        annual_table=tuple(rows),
        avg_saving_effort_during_loan=avg_effort,
        avg_post_loan_income=avg_post_loan,
        cagr=round_half_away(cagr, 4),
        saving_effort_irr=round_half_away(effort_irr, 4),
        sale_price=sale_price,
        net_sale_proceeds=net_sale_proceeds,
        balance_at_sale=balance_at_sale,
        capital_recovered_at_sale=capital_recovered,
    )
