# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
from dataclasses import dataclass

from scipy.optimize import bisect

from .utils import Converged, Diverged, SolverResult, round_half_away

__version__ = "0.4.0"


class ConvergenceError(RuntimeError):
    """Raised when an iterative rate search cannot bracket or reach a root."""


# =============================================================================
# Future value of an annuity with initial capital
# =============================================================================

ZERO_RATE_THRESHOLD = 1e-8

BRACKET_LOWER = -0.999
BRACKET_UPPER = 1.0
BRACKET_LOWER_LIMIT = -0.9999
BRACKET_UPPER_LIMIT = 5.0
MAX_BRACKET_ITERATIONS = 10


def _growth(rate: float, periods: int) -> float:
    try:
        return (1.0 + rate) ** periods
    except OverflowError:
        return math.inf


def future_value(
        initial: float,
        contribution: float,
        rate: float,
        periods: int
) -> float:
    """
    Future value of an initial capital plus level end-of-period contributions.

    Formula:
        FV = C0 · (1 + r)^n + PMT · [(1 + r)^n - 1] / r

    Where:
        C0  = initial capital
        PMT = contribution paid at the end of every period
        r   = periodic rate
        n   = number of periods

    Near r = 0 the annuity term is replaced by its limit, PMT · n, which keeps
    the function continuous where the closed form divides by zero. A growth
    factor that overflows gives +inf.
    """
    growth = _growth(rate, periods)
    if math.isinf(growth):
        return math.inf
    if abs(rate) < ZERO_RATE_THRESHOLD:
        return initial * growth + contribution * periods
    return initial * growth + contribution * (growth - 1.0) / rate


# =============================================================================
# Rate conversions
# =============================================================================

def monthly_to_annual(r_monthly: float) -> float:
    """
    Equivalent annual rate of a monthly compound rate: (1 + r)^12 - 1.

    Raises:
        ValueError: If r_monthly <= -1 (at or below -100%)
    """
    if r_monthly <= -1:
        raise ValueError(f"monthly rate must be greater than -1 (-100%), got {r_monthly}")
    return (1.0 + r_monthly) ** 12 - 1.0


def annual_to_monthly(r_annual: float) -> float:
    """
    Equivalent monthly rate of an annual compound rate: (1 + r)^(1/12) - 1.

    Raises:
        ValueError: If r_annual <= -1 (at or below -100%)
    """
    if r_annual <= -1:
        raise ValueError(f"annual rate must be greater than -1 (-100%), got {r_annual}")
    return (1.0 + r_annual) ** (1.0 / 12.0) - 1.0


# =============================================================================
# Monthly rate implied by a target future value
# =============================================================================

def _bracket(f, tol: float) -> tuple[float, float] | float:
    """
    Find [a, b] with f(a) · f(b) < 0, starting from [-0.999, 1.0].

    The bound whose value is closer to zero is moved outward by doubling.
    Returns a bare float when a bound already satisfies |f| < tol.
    """
    a, b = BRACKET_LOWER, BRACKET_UPPER
    fa, fb = f(a), f(b)

    expansions = 0
    while fa * fb >= 0 and expansions < MAX_BRACKET_ITERATIONS:
        if abs(fa) < tol:
            return a
        if abs(fb) < tol:
            return b

        if abs(fa) < abs(fb):
            a, fa = b, fb
            b *= 2
        else:
            b, fb = a, fa
            a *= 2
        if b > BRACKET_UPPER_LIMIT:
            raise ConvergenceError(
                "no bracketing interval found for the rate; check final capital, "
                "initial capital, contribution and months"
            )
        if a < BRACKET_LOWER_LIMIT:
            a = BRACKET_LOWER_LIMIT

        fa, fb = f(a), f(b)
        expansions += 1

    if fa * fb >= 0:
        raise ConvergenceError(
            "no bracketing interval found for the rate; check final capital, "
            "initial capital, contribution and months"
        )
    return a, b


def _bisect_root(f, a: float, b: float, tol: float, max_iter: int) -> SolverResult:
    root, info = bisect(f, a, b, xtol=tol, maxiter=max_iter, full_output=True, disp=False)
    if info.converged:
        return Converged(value=float(root), iterations=info.iterations)
    return Diverged(estimate=float(root), iterations=info.iterations, reason=info.flag)


def solve_monthly_rate_for_fv(
        final_capital: float,
        initial_capital: float,
        monthly_contribution: float,
        months: int,
        tol: float = 1e-10,
        max_iter: int = 200
) -> float:
    """
    Solve the monthly compound rate that turns C0 and PMT into a target FV.

    Root of:
        f(r) = C0 · (1 + r)^n + PMT · [(1 + r)^n - 1] / r - FV

    ALGORITHM:
    ----------
    1. Fast path: if C0 + PMT · n == FV exactly, the rate is 0.
    2. Bracketing: start from [-0.999, 1.0] (just above -100% to +100% a month).
       While f does not change sign, move the bound closer to zero outward by
       doubling, at most 10 times. The lower bound is clamped at -0.9999 and the
       search gives up past an upper bound of 5.0.
    3. Bisection on the bracket (scipy.optimize.bisect) to width tol, at most
       max_iter halvings.

    For r <= -1 f is taken as +inf (no financial meaning).

    Args:
        final_capital: Target future value FV (>= 0)
        initial_capital: Initial capital C0 (>= 0)
        monthly_contribution: Contribution PMT paid at the end of each month (>= 0)
        months: Number of months n (> 0)
        tol: Convergence tolerance on the bracket width
        max_iter: Maximum bisection iterations

    Returns:
        Monthly rate as decimal (e.g. 0.005 for 0.5% a month)

    Raises:
        ValueError: If months <= 0, an amount is negative, or both C0 and PMT are zero
        ConvergenceError: If no bracketing interval is found or bisection does
            not converge within max_iter

    Example:
        25 years of 175.21 a month growing to 115,441.12:

        >>> r = solve_monthly_rate_for_fv(115441.12, 0.0, 175.21, 300)
        >>> round(monthly_to_annual(r), 4)
        0.0582
    """
    fv, c0, pmt, n = final_capital, initial_capital, monthly_contribution, months

    if n <= 0:
        raise ValueError(f"months must be positive, got {n}")
    if c0 < 0 or pmt < 0 or fv < 0:
        raise ValueError(
            "amounts (initial capital, monthly contribution, final capital) cannot be negative, "
            f"got initial_capital={c0}, monthly_contribution={pmt}, final_capital={fv}"
        )
    if c0 == 0 and pmt == 0:
        raise ValueError("both principal and contribution are zero; no unique rate exists")

    if c0 + pmt * n == fv:
        return 0.0

    def f(r: float) -> float:
        if r <= -1:
            return math.inf
        return future_value(c0, pmt, r, n) - fv

    bracket = _bracket(f, tol)
    if isinstance(bracket, float):
        return bracket
    a, b = bracket

    result = _bisect_root(f, a, b, tol, max_iter)
    if not result.converged:
        raise ConvergenceError(
            f"monthly rate did not converge after {max_iter} iterations "
            f"(last estimate {result.estimate}, {result.reason})"
        )
    return result.value


@dataclass(frozen=True)
class AnnuityRateSolution:
    """Monthly and equivalent annual rate, both rounded to 10 decimals."""
    r_monthly: float
    r_annual: float


def solve_annual_rate_from_annuity_fv(
        final_capital: float,
        initial_capital: float,
        monthly_contribution: float,
        years: int,
        tol: float = 1e-10,
        max_iter: int = 200
) -> AnnuityRateSolution:
    """
    Annual rate implied by a final capital after a whole number of years of
    monthly contributions.

    Wraps solve_monthly_rate_for_fv() over years · 12 months and converts the
    monthly rate with monthly_to_annual().

    Raises:
        ValueError: If years is not an integer >= 1, an amount is negative, or a
            positive final capital is requested with neither capital nor
            contributions
        ConvergenceError: Propagated from the monthly solver
    """
    if isinstance(years, bool) or not float(years).is_integer() or years < 1:
        raise ValueError(f"years must be an integer greater than or equal to 1, got {years}")
    if final_capital < 0 or initial_capital < 0 or monthly_contribution < 0:
        raise ValueError("amounts cannot be negative")
    if initial_capital == 0 and monthly_contribution == 0:
        if final_capital > 0:
            raise ValueError(
                "a positive final capital cannot be reached without initial capital or contributions"
            )
        return AnnuityRateSolution(r_monthly=0.0, r_annual=0.0)

    r_monthly = solve_monthly_rate_for_fv(
        final_capital,
        initial_capital,
        monthly_contribution,
        int(years) * 12,
        tol=tol,
        max_iter=max_iter,
    )
    r_annual = monthly_to_annual(r_monthly)
    return AnnuityRateSolution(
        r_monthly=round_half_away(r_monthly, 10),
        r_annual=round_half_away(r_annual, 10),
    )
