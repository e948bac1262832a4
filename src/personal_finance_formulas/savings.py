# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .utils import round_half_away

__version__ = "0.4.0"


class Periodicity(Enum):
    """Contribution frequency."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def periods_per_year(self) -> int:
        return {"monthly": 12, "quarterly": 4, "yearly": 1}[self.value]


@dataclass(frozen=True)
class SavingsSeriesPoint:
    t: int                   # period index, 0 = before any growth
    value: float             # capital at the end of period t
    contributions: float     # cumulative gross contributions up to t


@dataclass(frozen=True)
class SavingsProjectionResult:
    final_capital: float
    total_contributions: float
    gross_gains: float       # final_capital - total_contributions (entry fees show up here)
    series: tuple[SavingsSeriesPoint, ...]


def project_savings(
        initial: float,
        periodic: float,
        periodicity: Periodicity | str,
        years: int,
        gross_annual_return: float,
        entry_fee_rate: float = 0.0
) -> SavingsProjectionResult:
    """
    Project an initial deposit plus periodic contributions over a number of years.

    With m periods per year the annual return is de-annualized geometrically:

        r_p = (1 + r_annual)^(1/m) - 1

    Then, for each period t = 1..years × m:

        CAPITAL_t = CAPITAL_(t-1) × (1 + r_p) + PERIODIC × (1 - FEE)
        CONTRIB_t = CONTRIB_(t-1) + PERIODIC

    Contributions are counted gross of the entry fee, so the fee drag is
    visible in the gains rather than in the contributions.

    Args:
        initial: Initial deposit (also counted as a contribution)
        periodic: Contribution paid at the end of every period
        periodicity: MONTHLY, QUARTERLY or YEARLY (or the string value)
        years: Horizon in whole years
        gross_annual_return: Annual return as decimal (0.05 = 5%)
        entry_fee_rate: Fee withheld from each periodic contribution (0.01 = 1%)

    Returns:
        SavingsProjectionResult whose series has years × m + 1 points,
        starting at t = 0 with value = contributions = initial

    Raises:
        ValueError: If an amount or years is negative, years is not an integer,
            gross_annual_return <= -1 or entry_fee_rate is outside [0, 1]

    Example:
        >>> res = project_savings(5000, 1000, "yearly", 3, 0.08, 0.02)
        >>> res.final_capital
        9480.03
    """
    periodicity = Periodicity(periodicity)
    if initial < 0 or periodic < 0:
        raise ValueError(f"amounts must be non-negative, got initial={initial}, periodic={periodic}")
    if years < 0 or not float(years).is_integer():
        raise ValueError(f"years must be a non-negative integer, got {years}")
    if gross_annual_return <= -1:
        raise ValueError(f"gross_annual_return must be greater than -1, got {gross_annual_return}")
    if not 0 <= entry_fee_rate <= 1:
        raise ValueError(f"entry_fee_rate must be within [0, 1], got {entry_fee_rate}")

    m = periodicity.periods_per_year
    periodic_rate = (1.0 + gross_annual_return) ** (1.0 / m) - 1.0
    total_periods = int(years) * m

    capital = float(initial)
    contributions = float(initial)
    series = [SavingsSeriesPoint(t=0, value=round_half_away(capital, 2),
                                 contributions=round_half_away(contributions, 2))]

    for t in range(1, total_periods + 1):
        capital *= 1.0 + periodic_rate
        if periodic > 0:
            capital += periodic * (1.0 - entry_fee_rate)
            contributions += periodic
        series.append(SavingsSeriesPoint(t=t, value=round_half_away(capital, 2),
                                         contributions=round_half_away(contributions, 2)))

    final_capital = round_half_away(capital, 2)
    return SavingsProjectionResult(
        final_capital=final_capital,
        total_contributions=round_half_away(contributions, 2),
        gross_gains=round_half_away(final_capital - contributions, 2),
        series=tuple(series),
    )
