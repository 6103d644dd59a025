"""Typed settlement errors.

Every error carries a stable machine ``code`` and structured ``details`` so
callers can map failures to their own (localized) messages.
"""

from __future__ import annotations

from typing import Any


class SettlementError(Exception):
    """Base error for settlement failures."""

    code = "settlement_error"

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "details": dict(self.details)}


class InvalidInstallmentCount(SettlementError):
    """Installment count outside the allowed range for the payment method."""

    code = "invalid_installment_count"


class MissingShippingQuote(SettlementError):
    """Calculated shipping requested without a quote."""

    code = "missing_shipping_quote"


class InvalidDiscountPercent(SettlementError):
    """Discount or fee percentage outside ``[0, 100)``."""

    code = "invalid_discount_percent"


class UnknownPaymentMethod(SettlementError):
    """Payment method outside the supported set."""

    code = "unknown_payment_method"


class InvalidOrderLine(SettlementError):
    """Negative price, non-positive quantity/kit size, or negative quote."""

    code = "invalid_order_line"


class InvalidCommissionTerms(SettlementError):
    """Commission terms that cannot produce a valid payout."""

    code = "invalid_commission_terms"


class InvalidAttributionEvent(SettlementError):
    """Attribution event with a timestamp that cannot be placed in time."""

    code = "invalid_attribution_event"


class InvalidPayload(SettlementError):
    """Request document that does not match the settlement payload schema."""

    code = "invalid_payload"


class ConfigError(SettlementError):
    """Malformed tenant pricing configuration."""

    code = "invalid_config"
