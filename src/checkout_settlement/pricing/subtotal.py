"""Pre-shipping subtotal per payment method."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from checkout_settlement.core.errors import InvalidDiscountPercent
from checkout_settlement.core.money import apply_discount, is_valid_discount
from checkout_settlement.core.types import OrderBumpLine, OrderLine, PaymentMethod


@dataclass(frozen=True, slots=True)
class Subtotal:
    raw_subtotal_cents: int
    discounted_subtotal_cents: int
    bump_cents: int = 0

    @property
    def pix_discount_cents(self) -> int:
        return self.raw_subtotal_cents - self.discounted_subtotal_cents


def build_subtotal(
    main_line: OrderLine,
    bump_line: OrderBumpLine | None,
    method: PaymentMethod,
    pix_discount_pct: Decimal,
) -> Subtotal:
    """Combine the main line and the selected bump, then apply the PIX discount.

    The PIX discount applies to main + bump, never to shipping. Its percentage
    is validated for every method so a misconfigured checkout fails even when
    the customer picks another method.

    Raises:
        InvalidDiscountPercent: If ``pix_discount_pct`` is outside ``[0, 100)``.
    """
    if not is_valid_discount(pix_discount_pct):
        raise InvalidDiscountPercent(
            "pix_discount_pct must be in [0, 100)",
            field="pix_discount_pct",
            value=str(pix_discount_pct),
        )

    bump_cents = bump_line.charged_cents if bump_line is not None else 0
    raw = main_line.line_total_cents + bump_cents

    discounted = raw
    if method is PaymentMethod.PIX:
        discounted = apply_discount(raw, pix_discount_pct)

    return Subtotal(
        raw_subtotal_cents=raw,
        discounted_subtotal_cents=discounted,
        bump_cents=bump_cents,
    )
