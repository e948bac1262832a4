# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Sequence

import numpy as np

__version__ = "0.4.0"


# =============================================================================
# Rounding and clamping
# =============================================================================

def round_half_away(value: float, decimals: int = 2) -> float:
    """
    Round a float half away from zero at a fixed number of decimals.

    Every monetary figure produced by the calculators goes through this function.

    The rounding is done on the shortest decimal representation of the float
    (the string Python prints for it), not on its binary expansion. The naive

        round(value * 10**d) / 10**d

    misrounds values such as 1.005, whose binary expansion is 1.00499999...,
    and Python's built-in round() applies banker's rounding (0.125 -> 0.12).
    Shifting through the decimal string gives the result a person would get
    rounding by hand:

        >>> round_half_away(0.125, 2)
        0.13
        >>> round_half_away(1.005, 2)
        1.01
        >>> round_half_away(-123.456, 2)
        -123.46

    Args:
        value: Value to round
        decimals: Number of decimals to keep (negative rounds to tens, hundreds...)

    Returns:
        Rounded value as float. NaN and infinities are returned unchanged.
    """
    value = float(value)
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-decimals)
    with localcontext() as ctx:
        ctx.prec = 60
        rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    # Decimal('-0.00') -> -0.0; normalise to 0.0
    return float(rounded) + 0.0


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp x to [lo, hi]. The caller guarantees lo <= hi."""
    return max(lo, min(hi, x))


def round_to_nearest_step(value: float, step: float) -> float:
    """
    Round value to the nearest multiple of step (ties away from zero).

    Args:
        value: Value to round
        step: Positive step (e.g. 50 for slider positions, 0.05 for rates)

    Raises:
        ValueError: If step is not positive
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    return round_half_away(value / step, 0) * step


# =============================================================================
# Iterative solver outcome
# =============================================================================
#
# Iterative solvers in this package return one of two variants so that callers
# can decide how to surface a failure. The legacy boundaries keep their own
# contract: irr() turns Diverged into NaN, the rate solver raises
# ConvergenceError.
# =============================================================================

@dataclass(frozen=True)
class Converged:
    """Solver reached its tolerance."""
    value: float
    iterations: int

    @property
    def converged(self) -> bool:
        return True

    def value_or_nan(self) -> float:
        return self.value


@dataclass(frozen=True)
class Diverged:
    """Solver exhausted its budget or hit a degenerate step."""
    estimate: float
    iterations: int
    reason: str

    @property
    def converged(self) -> bool:
        return False

    def value_or_nan(self) -> float:
        return math.nan


SolverResult = Converged | Diverged


# =============================================================================
# Internal rate of return
# =============================================================================

IRR_MAX_ITERATIONS = 1000
IRR_TOLERANCE = 1e-5


def newton_irr(
        cash_flows: Sequence[float] | np.ndarray,
        guess: float = 0.1,
        tolerance: float = IRR_TOLERANCE,
        max_iterations: int = IRR_MAX_ITERATIONS
) -> SolverResult:
    """
    Solve the internal rate of return of a regular cash-flow sequence.

    Newton–Raphson on the net present value:

        NPV(r)  =  Σ cf_j / (1 + r)^j
        NPV'(r) = -Σ j · cf_j / (1 + r)^(j+1)

    Index 0 is time 0 and is not discounted. Periods are whatever spacing the
    cash flows use (monthly flows give a monthly rate).

    Args:
        cash_flows: Cash flows, outflows negative
        guess: Starting rate
        tolerance: Convergence threshold on |NPV|
        max_iterations: Iteration budget

    Returns:
        Converged(rate, iterations) once |NPV| < tolerance, otherwise Diverged.
        Never raises for numeric reasons: a zero derivative or a non-finite
        iterate ends the search as Diverged.
    """
    flows = np.asarray(cash_flows, dtype=float)
    if flows.size == 0:
        return Diverged(estimate=math.nan, iterations=0, reason="no cash flows")
    t = np.arange(flows.size, dtype=float)

    r = float(guess)
    with np.errstate(all="ignore"):
        for i in range(max_iterations):
            base = 1.0 + r
            npv = float(np.sum(flows / np.power(base, t)))
            derivative = float(-np.sum(t * flows / np.power(base, t + 1.0)))

            if abs(npv) < tolerance:
                return Converged(value=r, iterations=i)
            if derivative == 0.0 or not math.isfinite(derivative) or not math.isfinite(npv):
                return Diverged(estimate=r, iterations=i, reason="degenerate Newton step")
            r = r - npv / derivative
            if not math.isfinite(r):
                return Diverged(estimate=r, iterations=i + 1, reason="non-finite iterate")

    return Diverged(estimate=r, iterations=max_iterations, reason="iteration budget exhausted")


def irr(cash_flows: Sequence[float] | np.ndarray, guess: float = 0.1) -> float:
    """
    IRR of a cash-flow sequence, or NaN when Newton–Raphson does not converge.

    This is the soft-failure contract used by the rental engine: it never raises.
    Use newton_irr() to inspect why a solve failed.
    """
    return newton_irr(cash_flows, guess).value_or_nan()
