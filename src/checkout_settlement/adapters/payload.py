"""Request documents in, plain dicts out.

Checkout submission flows send settlement requests as JSON (or YAML for the
CLI). These pydantic models validate the document shape and convert it into
the frozen domain request; ``result_to_dict`` goes the other way.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError
import yaml

from checkout_settlement.core.errors import InvalidPayload
from checkout_settlement.core.types import (
    AffiliateLink,
    AttributionEvent,
    AttributionModel,
    CommissionLedgerEntry,
    CommissionTerms,
    CommissionType,
    OrderBumpLine,
    OrderLine,
    OrderSettlementRequest,
    OrderSettlementResult,
    PartnerCommission,
    PartnerTerms,
    ShippingMode,
    ShippingSpec,
    TenantPricingConfig,
)


class PayloadBaseModel(BaseModel):
    """Shared base for request document models with a short parse alias."""

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def parse(cls, data: Any) -> Self:
        return cls.model_validate(data)


class OrderLinePayload(PayloadBaseModel):
    base_price_cents: int
    quantity: int = 1
    kit_size: int = 1

    def to_domain(self) -> OrderLine:
        return OrderLine(
            base_price_cents=self.base_price_cents,
            quantity=self.quantity,
            kit_size=self.kit_size,
        )


class OrderBumpPayload(PayloadBaseModel):
    base_price_cents: int
    discount_percent: Decimal = Decimal(0)
    selected: bool = True

    def to_domain(self) -> OrderBumpLine:
        return OrderBumpLine(
            base_price_cents=self.base_price_cents,
            discount_percent=self.discount_percent,
            selected=self.selected,
        )


class ShippingPayload(PayloadBaseModel):
    mode: ShippingMode = ShippingMode.NONE
    quote_cents: int | None = None

    def to_domain(self) -> ShippingSpec:
        return ShippingSpec(mode=self.mode, quote_cents=self.quote_cents)


class AttributionEventPayload(PayloadBaseModel):
    affiliate_id: str
    # float first so bare epoch numbers are not coerced into datetimes
    occurred_at: float | datetime
    session_id: str | None = None

    def to_domain(self) -> AttributionEvent:
        return AttributionEvent(
            affiliate_id=self.affiliate_id,
            occurred_at=self.occurred_at,
            session_id=self.session_id,
        )


class AttributionPayload(PayloadBaseModel):
    model: AttributionModel = AttributionModel.LAST_CLICK
    session_id: str | None = None
    events: list[AttributionEventPayload] = Field(default_factory=list)


class CommissionTermsPayload(PayloadBaseModel):
    commission_type: CommissionType
    commission_value: Decimal

    def to_terms(self) -> CommissionTerms:
        return CommissionTerms(
            commission_type=self.commission_type,
            commission_value=self.commission_value,
        )


class AffiliateLinkPayload(CommissionTermsPayload):
    affiliate_id: str

    def to_domain(self) -> AffiliateLink:
        return AffiliateLink(affiliate_id=self.affiliate_id, terms=self.to_terms())


class PartnerPayload(CommissionTermsPayload):
    party_id: str

    def to_domain(self) -> PartnerCommission:
        return PartnerCommission(party_id=self.party_id, terms=self.to_terms())


class PartnersPayload(PayloadBaseModel):
    industry: PartnerPayload | None = None
    factory: PartnerPayload | None = None
    coproducer: PartnerPayload | None = None

    def to_domain(self) -> PartnerTerms:
        return PartnerTerms(
            industry=self.industry.to_domain() if self.industry else None,
            factory=self.factory.to_domain() if self.factory else None,
            coproducer=self.coproducer.to_domain() if self.coproducer else None,
        )


class SettlementRequestPayload(PayloadBaseModel):
    """Top-level settlement request document."""

    payment_method: str
    main_line: OrderLinePayload
    installments: int = 1
    pix_discount_pct: Decimal = Decimal(0)
    bump_line: OrderBumpPayload | None = None
    shipping: ShippingPayload = Field(default_factory=ShippingPayload)
    attribution: AttributionPayload = Field(default_factory=AttributionPayload)
    affiliate_links: list[AffiliateLinkPayload] = Field(default_factory=list)
    partners: PartnersPayload = Field(default_factory=PartnersPayload)

    def to_request(self, tenant: TenantPricingConfig) -> OrderSettlementRequest:
        """Convert to the domain request bound to ``tenant``.

        Domain validation (percent ranges, line quantities, commission terms)
        raises the typed settlement errors.
        """
        return OrderSettlementRequest(
            main_line=self.main_line.to_domain(),
            payment_method=self.payment_method,
            bump_line=self.bump_line.to_domain() if self.bump_line else None,
            installments=self.installments,
            pix_discount_pct=self.pix_discount_pct,
            shipping_spec=self.shipping.to_domain(),
            attribution_events=tuple(e.to_domain() for e in self.attribution.events),
            attribution_model=self.attribution.model,
            session_id=self.attribution.session_id,
            affiliate_links=tuple(link.to_domain() for link in self.affiliate_links),
            partner_terms=self.partners.to_domain(),
            tenant=tenant,
        )


def parse_request(data: Any, tenant: TenantPricingConfig) -> OrderSettlementRequest:
    """Validate a request document and build the domain request.

    Raises:
        InvalidPayload: If the document does not match the schema.
        SettlementError: If the values fail domain validation.
    """
    try:
        payload = SettlementRequestPayload.parse(data)
    except ValidationError as exc:
        raise InvalidPayload(
            "Settlement request does not match the expected schema",
            errors=[
                {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
                for err in exc.errors()
            ],
        ) from exc
    return payload.to_request(tenant)


def load_request_file(path: Path, tenant: TenantPricingConfig) -> OrderSettlementRequest:
    """Read a JSON or YAML request document from disk."""
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as exc:
        raise InvalidPayload(f"Cannot read request file: {path}", path=str(path)) from exc
    except yaml.YAMLError as exc:
        raise InvalidPayload(f"Request file is not valid JSON/YAML: {path}", path=str(path)) from exc
    return parse_request(data, tenant)


def result_to_dict(result: OrderSettlementResult) -> dict[str, Any]:
    """Serialize a result to JSON-safe types (percentages as strings)."""
    charge = result.charge
    return {
        "charge": {
            "payment_method": charge.payment_method.value,
            "installments": charge.installments,
            "raw_subtotal_cents": charge.raw_subtotal_cents,
            "discounted_subtotal_cents": charge.discounted_subtotal_cents,
            "shipping_cents": charge.shipping_cents,
            "total_cents": charge.total_cents,
            "payable_cents": charge.payable_cents,
            "per_installment_cents": charge.per_installment_cents,
            "installment_amounts": list(charge.installment_amounts),
            "has_interest": charge.has_interest,
        },
        "commissionable_base_cents": result.commissionable_base_cents,
        "resolved_affiliate_id": result.resolved_affiliate_id,
        "commissions": [_entry_to_dict(entry) for entry in result.commissions],
    }


def _entry_to_dict(entry: CommissionLedgerEntry) -> dict[str, Any]:
    return {
        "party_kind": entry.party_kind.value,
        "party_id": entry.party_id,
        "commission_type": entry.commission_type.value,
        "commission_value": str(entry.commission_value),
        "computed_amount_cents": entry.computed_amount_cents,
        "capped": entry.capped,
    }
