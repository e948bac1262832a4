# Requires Python 3.12+
from __future__ import annotations

from dataclasses import dataclass

from .utils import round_half_away

__version__ = "0.4.0"

INPUT_PERIODS = ("monthly", "annual")
PAID_MONTHS = (12, 13, 14, 15)


@dataclass(frozen=True)
class GrossToNetResult:
    net_before_tax_annual: float
    net_before_tax_monthly_avg: float
    net_after_tax_annual: float
    net_after_tax_monthly_avg: float
    net_per_pay: float


def compute_gross_to_net(
        gross_value: float,
        input_period: str,
        paid_months: int,
        charges_rate: float,
        withholding_rate: float
) -> GrossToNetResult:
    """
    Convert gross pay to net pay before and after income-tax withholding.

        ANNUAL_GROSS = gross_value × paid_months   (monthly input)
                     = gross_value                 (annual input)
        NET_BEFORE   = ANNUAL_GROSS × (1 - charges_rate)
        NET_AFTER    = NET_BEFORE × (1 - withholding_rate)
        NET_PER_PAY  = ANNUAL_GROSS / paid_months × (1 - charges_rate) × (1 - withholding_rate)

    NET_PER_PAY divides by paid_months even for an annual input: a 13th or 14th
    month spreads the same annual pay over more pay slips. The monthly averages
    always divide by 12.

    Raises:
        ValueError: If input_period or paid_months is not supported, or a rate
            is outside [0, 1]

    Example:
        >>> compute_gross_to_net(3000, "monthly", 12, 0.25, 0.10).net_per_pay
        2025.0
    """
    if input_period not in INPUT_PERIODS:
        raise ValueError(f"input_period must be one of {INPUT_PERIODS}, got {input_period!r}")
    if paid_months not in PAID_MONTHS:
        raise ValueError(f"paid_months must be one of {PAID_MONTHS}, got {paid_months}")
    if not 0 <= charges_rate <= 1:
        raise ValueError(f"charges_rate must be within [0, 1], got {charges_rate}")
    if not 0 <= withholding_rate <= 1:
        raise ValueError(f"withholding_rate must be within [0, 1], got {withholding_rate}")

    annual_gross = gross_value * paid_months if input_period == "monthly" else gross_value
    net_before = annual_gross * (1 - charges_rate)
    net_after = net_before * (1 - withholding_rate)

    return GrossToNetResult(
        net_before_tax_annual=round_half_away(net_before, 2),
        net_before_tax_monthly_avg=round_half_away(net_before / 12, 2),
        net_after_tax_annual=round_half_away(net_after, 2),
        net_after_tax_monthly_avg=round_half_away(net_after / 12, 2),
        net_per_pay=round_half_away(
            (annual_gross / paid_months) * (1 - charges_rate) * (1 - withholding_rate), 2
        ),
    )
