"""Charge-side pricing: subtotal, shipping and card installments."""

from __future__ import annotations

from checkout_settlement.pricing.installments import (
    InstallmentQuote,
    installment_options,
    price_installments,
)
from checkout_settlement.pricing.shipping import ShippingAdjustment, apply_shipping
from checkout_settlement.pricing.subtotal import Subtotal, build_subtotal

__all__ = [
    "InstallmentQuote",
    "ShippingAdjustment",
    "Subtotal",
    "apply_shipping",
    "build_subtotal",
    "installment_options",
    "price_installments",
]
