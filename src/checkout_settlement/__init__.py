"""Order settlement: charge schedule and commission ledger for checkout orders."""

from __future__ import annotations

from checkout_settlement.core.errors import (
    ConfigError,
    InvalidAttributionEvent,
    InvalidCommissionTerms,
    InvalidDiscountPercent,
    InvalidInstallmentCount,
    InvalidOrderLine,
    InvalidPayload,
    MissingShippingQuote,
    SettlementError,
    UnknownPaymentMethod,
)
from checkout_settlement.core.types import (
    AffiliateLink,
    AttributionEvent,
    AttributionModel,
    ChargeSchedule,
    CommissionLedgerEntry,
    CommissionTerms,
    CommissionType,
    InstallmentFeeTable,
    OrderBumpLine,
    OrderLine,
    OrderSettlementRequest,
    OrderSettlementResult,
    PartnerCommission,
    PartnerTerms,
    PartyKind,
    PaymentMethod,
    ShippingMode,
    ShippingSpec,
    TenantPricingConfig,
)
from checkout_settlement.services.settlement import SettlementService, settle

__all__ = [
    "AffiliateLink",
    "AttributionEvent",
    "AttributionModel",
    "ChargeSchedule",
    "CommissionLedgerEntry",
    "CommissionTerms",
    "CommissionType",
    "ConfigError",
    "InstallmentFeeTable",
    "InvalidAttributionEvent",
    "InvalidCommissionTerms",
    "InvalidDiscountPercent",
    "InvalidInstallmentCount",
    "InvalidOrderLine",
    "InvalidPayload",
    "MissingShippingQuote",
    "OrderBumpLine",
    "OrderLine",
    "OrderSettlementRequest",
    "OrderSettlementResult",
    "PartnerCommission",
    "PartnerTerms",
    "PartyKind",
    "PaymentMethod",
    "SettlementError",
    "SettlementService",
    "ShippingMode",
    "ShippingSpec",
    "TenantPricingConfig",
    "UnknownPaymentMethod",
    "settle",
]
