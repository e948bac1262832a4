# Requires Python 3.12+
from __future__ import annotations

from dataclasses import dataclass

from .utils import round_half_away

__version__ = "0.4.0"

PRICE_TYPES = ("excl", "incl")


@dataclass(frozen=True)
class VatBreakdown:
    price_excl_tax: float
    vat_amount: float
    price_incl_tax: float


def compute_vat(price: float, vat_rate: float, price_type: str = "excl") -> VatBreakdown:
    """
    Split a price into its excluding-tax, VAT and including-tax parts.

        excl:  VAT = price × rate,            INCL = price + VAT
        incl:  EXCL = price / (1 + rate),     VAT = price - EXCL

    Args:
        price: Price as entered (> 0)
        vat_rate: VAT rate as decimal (0.20 = 20%)
        price_type: "excl" if price excludes VAT, "incl" if it includes it

    Raises:
        ValueError: If price <= 0, vat_rate is outside [0, 1] or price_type is unknown
    """
    if price <= 0:
        raise ValueError(f"price must be positive, got {price}")
    if not 0 <= vat_rate <= 1:
        raise ValueError(f"vat_rate must be within [0, 1], got {vat_rate}")
    if price_type not in PRICE_TYPES:
        raise ValueError(f"price_type must be one of {PRICE_TYPES}, got {price_type!r}")

    if price_type == "excl":
        excl = price
        vat = excl * vat_rate
        incl = excl + vat
    else:
        incl = price
        excl = incl / (1 + vat_rate)
        vat = incl - excl

    return VatBreakdown(
        price_excl_tax=round_half_away(excl, 2),
        vat_amount=round_half_away(vat, 2),
        price_incl_tax=round_half_away(incl, 2),
    )
