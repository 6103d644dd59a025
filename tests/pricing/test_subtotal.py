"""Tests for subtotal building."""

from __future__ import annotations

from decimal import Decimal

import pytest

from checkout_settlement.core.errors import InvalidDiscountPercent
from checkout_settlement.core.types import OrderBumpLine, OrderLine, PaymentMethod
from checkout_settlement.pricing.subtotal import build_subtotal


class TestBuildSubtotal:
    def test_pix_discount_applied(self) -> None:
        # Input
        main_line = OrderLine(base_price_cents=10000)

        # Act
        subtotal = build_subtotal(main_line, None, PaymentMethod.PIX, Decimal("5"))

        # Assert
        assert subtotal.raw_subtotal_cents == 10000
        assert subtotal.discounted_subtotal_cents == 9500
        assert subtotal.pix_discount_cents == 500

    @pytest.mark.parametrize("method", [PaymentMethod.CREDIT_CARD, PaymentMethod.BOLETO])
    def test_pix_discount_ignored_for_other_methods(self, method) -> None:
        subtotal = build_subtotal(
            OrderLine(base_price_cents=10000), None, method, Decimal("5")
        )

        assert subtotal.discounted_subtotal_cents == 10000
        assert subtotal.pix_discount_cents == 0

    def test_bump_included_before_pix_discount(self) -> None:
        main_line = OrderLine(base_price_cents=4000, quantity=2)
        bump = OrderBumpLine(base_price_cents=2500, discount_percent=Decimal("20"))

        subtotal = build_subtotal(main_line, bump, PaymentMethod.PIX, Decimal("10"))

        assert subtotal.bump_cents == 2000
        assert subtotal.raw_subtotal_cents == 10000
        assert subtotal.discounted_subtotal_cents == 9000

    def test_unselected_bump_excluded(self) -> None:
        bump = OrderBumpLine(base_price_cents=2500, selected=False)

        subtotal = build_subtotal(
            OrderLine(base_price_cents=4000), bump, PaymentMethod.BOLETO, Decimal(0)
        )

        assert subtotal.bump_cents == 0
        assert subtotal.raw_subtotal_cents == 4000

    def test_kit_size_multiplies_price(self) -> None:
        subtotal = build_subtotal(
            OrderLine(base_price_cents=1500, quantity=1, kit_size=3),
            None,
            PaymentMethod.CREDIT_CARD,
            Decimal(0),
        )

        assert subtotal.raw_subtotal_cents == 4500

    @pytest.mark.parametrize("method", list(PaymentMethod))
    @pytest.mark.parametrize("percent", [Decimal("-0.01"), Decimal("100")])
    def test_invalid_pix_discount_rejected_for_every_method(self, method, percent) -> None:
        with pytest.raises(InvalidDiscountPercent, match="pix_discount_pct"):
            build_subtotal(OrderLine(base_price_cents=100), None, method, percent)
