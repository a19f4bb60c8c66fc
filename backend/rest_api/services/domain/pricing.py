"""
Order pricing.

Pure functions over integer cents. No database access: callers resolve
menu items first and pass the matched variant / add-ons in.

    line total = (unit price + add-on sum) * quantity
    subtotal   = sum(line totals)
    tax        = subtotal * 8%, rounded half up to the cent
    total      = subtotal + delivery fee + tax + tip - discount (never below 0)
"""

from dataclasses import dataclass
from typing import Any

from shared.config.constants import BASIS_POINTS, TAX_RATE_BASIS_POINTS


@dataclass(frozen=True)
class PricedLine:
    """Resolved price of one cart line."""

    unit_price_cents: int
    add_on_cents: int
    quantity: int

    @property
    def total_cents(self) -> int:
        return (self.unit_price_cents + self.add_on_cents) * self.quantity


@dataclass(frozen=True)
class PricingBreakdown:
    subtotal_cents: int
    delivery_fee_cents: int
    tax_cents: int
    tip_cents: int
    discount_cents: int
    total_cents: int


def resolve_unit_price(base_price_cents: int, variant: dict[str, Any] | None) -> int:
    """Variant price when a matching variant was found, else the base price."""
    if variant is not None:
        return int(variant["price_cents"])
    return base_price_cents


def sum_add_ons(add_ons: list[dict[str, Any]]) -> int:
    return sum(int(a["price_cents"]) for a in add_ons)


def price_line(
    base_price_cents: int,
    quantity: int,
    variant: dict[str, Any] | None = None,
    add_ons: list[dict[str, Any]] | None = None,
) -> PricedLine:
    return PricedLine(
        unit_price_cents=resolve_unit_price(base_price_cents, variant),
        add_on_cents=sum_add_ons(add_ons or []),
        quantity=quantity,
    )


def calculate_tax(subtotal_cents: int, rate_basis_points: int = TAX_RATE_BASIS_POINTS) -> int:
    """
    Tax in cents, rounded half up.

    Integer arithmetic only: 2700 cents at 800 bp -> 216 cents.
    """
    return (subtotal_cents * rate_basis_points + BASIS_POINTS // 2) // BASIS_POINTS


def calculate_pricing(
    lines: list[PricedLine],
    delivery_fee_cents: int,
    tip_cents: int = 0,
    discount_cents: int = 0,
) -> PricingBreakdown:
    subtotal = sum(line.total_cents for line in lines)
    tax = calculate_tax(subtotal)
    total = max(0, subtotal + delivery_fee_cents + tax + tip_cents - discount_cents)
    return PricingBreakdown(
        subtotal_cents=subtotal,
        delivery_fee_cents=delivery_fee_cents,
        tax_cents=tax,
        tip_cents=tip_cents,
        discount_cents=discount_cents,
        total_cents=total,
    )
