"""Shipping on top of the subtotal, kept out of the commissionable base."""

from __future__ import annotations

from dataclasses import dataclass

from checkout_settlement.core.errors import MissingShippingQuote
from checkout_settlement.core.types import ShippingMode, ShippingSpec


@dataclass(frozen=True, slots=True)
class ShippingAdjustment:
    total_cents: int
    shipping_cents: int
    commissionable_base_cents: int
    shipping_visible: bool = False


def apply_shipping(subtotal_cents: int, spec: ShippingSpec) -> ShippingAdjustment:
    """Add shipping to ``subtotal_cents``.

    ``commissionable_base_cents`` is always the subtotal: shipping is returned
    as its own field and never merged into the base.

    Raises:
        MissingShippingQuote: If the mode is ``calculated`` and no quote is set.
    """
    if spec.mode is ShippingMode.CALCULATED:
        if spec.quote_cents is None:
            raise MissingShippingQuote(
                "Calculated shipping requires a quote before settlement",
                mode=spec.mode.value,
            )
        return ShippingAdjustment(
            total_cents=subtotal_cents + spec.quote_cents,
            shipping_cents=spec.quote_cents,
            commissionable_base_cents=subtotal_cents,
            shipping_visible=True,
        )

    # Free shipping is shown to the customer at zero; the merchant pays the
    # carrier outside this engine.
    return ShippingAdjustment(
        total_cents=subtotal_cents,
        shipping_cents=0,
        commissionable_base_cents=subtotal_cents,
        shipping_visible=spec.mode is ShippingMode.FREE,
    )
