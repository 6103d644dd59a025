"""Settlement request, configuration and result types.

All types are frozen so a settled result is a value: two settlements of the
same request compare equal, and nothing downstream can alter a ledger entry.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
import enum
import math

from checkout_settlement.core.errors import (
    ConfigError,
    InvalidAttributionEvent,
    InvalidCommissionTerms,
    InvalidDiscountPercent,
    InvalidInstallmentCount,
    InvalidOrderLine,
    UnknownPaymentMethod,
)
from checkout_settlement.core.money import (
    HUNDRED,
    Percent,
    apply_discount,
    is_valid_discount,
    to_decimal,
)

MAX_SUPPORTED_INSTALLMENTS = 24
DEFAULT_MAX_INSTALLMENTS = 12

# Platform default when a tenant has no fee table of its own.
DEFAULT_INSTALLMENT_FEES: dict[int, Decimal] = {
    2: Decimal("3.49"),
    3: Decimal("4.29"),
    4: Decimal("4.99"),
    5: Decimal("5.49"),
    6: Decimal("5.99"),
    7: Decimal("6.49"),
    8: Decimal("6.99"),
    9: Decimal("7.49"),
    10: Decimal("7.99"),
    11: Decimal("8.49"),
    12: Decimal("8.99"),
}


class PaymentMethod(enum.Enum):
    """Supported payment methods."""

    PIX = "pix"
    CREDIT_CARD = "credit_card"
    BOLETO = "boleto"

    @classmethod
    def parse(cls, value: PaymentMethod | str) -> PaymentMethod:
        """Accept a member or its case-insensitive value.

        Raises:
            UnknownPaymentMethod: If the value names no supported method.
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise UnknownPaymentMethod(
            f"Unsupported payment method: {value!r}",
            payment_method=str(value),
            supported=[m.value for m in cls],
        )


class ShippingMode(enum.Enum):
    NONE = "none"
    FREE = "free"
    CALCULATED = "calculated"


class CommissionType(enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PartyKind(enum.Enum):
    """Commission recipients, in ledger order."""

    AFFILIATE = "affiliate"
    INDUSTRY = "industry"
    FACTORY = "factory"
    COPRODUCER = "coproducer"


class AttributionModel(enum.Enum):
    FIRST_CLICK = "first_click"
    LAST_CLICK = "last_click"


# ---------------------------------------------------------------------------
# Order lines
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OrderLine:
    """Main product line. ``base_price_cents`` is the price of one kit."""

    base_price_cents: int
    quantity: int = 1
    kit_size: int = 1

    def __post_init__(self) -> None:
        if self.base_price_cents < 0:
            raise InvalidOrderLine(
                "Order line price cannot be negative",
                field="base_price_cents",
                value=self.base_price_cents,
            )
        if self.quantity < 1:
            raise InvalidOrderLine(
                "Order line quantity must be at least 1",
                field="quantity",
                value=self.quantity,
            )
        if self.kit_size < 1:
            raise InvalidOrderLine(
                "Order line kit size must be at least 1",
                field="kit_size",
                value=self.kit_size,
            )

    @property
    def line_total_cents(self) -> int:
        return self.base_price_cents * self.quantity * self.kit_size


@dataclass(frozen=True, slots=True)
class OrderBumpLine:
    """Optional secondary product with its own discount."""

    base_price_cents: int
    discount_percent: Decimal = Decimal(0)
    selected: bool = True

    def __post_init__(self) -> None:
        if self.base_price_cents < 0:
            raise InvalidOrderLine(
                "Order bump price cannot be negative",
                field="bump_line.base_price_cents",
                value=self.base_price_cents,
            )
        percent = _percent_or_error(
            self.discount_percent, field_name="bump_line.discount_percent"
        )
        object.__setattr__(self, "discount_percent", percent)

    @property
    def price_cents(self) -> int:
        """Bump price after its own discount."""
        return apply_discount(self.base_price_cents, self.discount_percent)

    @property
    def charged_cents(self) -> int:
        return self.price_cents if self.selected else 0


@dataclass(frozen=True, slots=True)
class ShippingSpec:
    mode: ShippingMode = ShippingMode.NONE
    quote_cents: int | None = None

    def __post_init__(self) -> None:
        if self.quote_cents is not None and self.quote_cents < 0:
            raise InvalidOrderLine(
                "Shipping quote cannot be negative",
                field="shipping.quote_cents",
                value=self.quote_cents,
            )


# ---------------------------------------------------------------------------
# Tenant configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class InstallmentFeeTable:
    """Fee percentage per installment count, sorted by count."""

    rates: tuple[tuple[int, Decimal], ...] = ()

    def __post_init__(self) -> None:
        normalized: dict[int, Decimal] = {}
        for count, fee in self.rates:
            if isinstance(count, bool) or not isinstance(count, int) or count < 2:
                raise InvalidInstallmentCount(
                    "Fee table keys must be installment counts >= 2",
                    installments=count,
                )
            normalized[count] = _percent_or_error(
                fee, field_name=f"installment_fees.{count}"
            )
        object.__setattr__(self, "rates", tuple(sorted(normalized.items())))

    @classmethod
    def from_mapping(cls, fees: Mapping[int | str, Percent]) -> InstallmentFeeTable:
        """Build a table from ``{count: percent}``.

        Keys must be ints or strings of digits; fractional keys are rejected
        rather than truncated.
        """
        rates: list[tuple[int, Decimal]] = []
        for key, fee in fees.items():
            if isinstance(key, int) and not isinstance(key, bool):
                count = key
            elif isinstance(key, str) and key.strip().isdecimal():
                count = int(key.strip())
            else:
                raise InvalidInstallmentCount(
                    f"Fee table key is not an installment count: {key!r}",
                    installments=str(key),
                )
            rates.append((count, fee))
        return cls(rates=tuple(rates))

    @classmethod
    def default(cls) -> InstallmentFeeTable:
        return cls.from_mapping(DEFAULT_INSTALLMENT_FEES)

    def fee_for(self, installments: int) -> Decimal:
        """Fee percent for ``installments``; 0 when the count is not listed."""
        for count, fee in self.rates:
            if count == installments:
                return fee
        return Decimal(0)

    def as_dict(self) -> dict[int, Decimal]:
        return dict(self.rates)


@dataclass(frozen=True, slots=True)
class TenantPricingConfig:
    """Read-only pricing snapshot for one tenant."""

    installment_fees: InstallmentFeeTable = field(
        default_factory=InstallmentFeeTable.default
    )
    max_installments: int = DEFAULT_MAX_INSTALLMENTS
    fee_passed_to_buyer: bool = True

    def __post_init__(self) -> None:
        if not 1 <= self.max_installments <= MAX_SUPPORTED_INSTALLMENTS:
            raise ConfigError(
                f"max_installments must be between 1 and {MAX_SUPPORTED_INSTALLMENTS}",
                max_installments=self.max_installments,
            )


# ---------------------------------------------------------------------------
# Commission terms and attribution
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CommissionTerms:
    """Percentage of the commissionable base, or a flat amount in cents."""

    commission_type: CommissionType
    commission_value: Decimal

    def __post_init__(self) -> None:
        try:
            value = to_decimal(self.commission_value)
        except ValueError as exc:
            raise InvalidCommissionTerms(
                "Commission value is not numeric",
                commission_value=str(self.commission_value),
            ) from exc
        if value < 0:
            raise InvalidCommissionTerms(
                "Commission value cannot be negative",
                commission_type=self.commission_type.value,
                commission_value=str(value),
            )
        if self.commission_type is CommissionType.PERCENTAGE and value > HUNDRED:
            raise InvalidCommissionTerms(
                "Percentage commission cannot exceed 100",
                commission_type=self.commission_type.value,
                commission_value=str(value),
            )
        if self.commission_type is CommissionType.FIXED and value != value.to_integral_value():
            raise InvalidCommissionTerms(
                "Fixed commission must be a whole number of cents",
                commission_type=self.commission_type.value,
                commission_value=str(value),
            )
        object.__setattr__(self, "commission_value", value)

    @classmethod
    def percentage(cls, value: Percent) -> CommissionTerms:
        return cls(CommissionType.PERCENTAGE, to_decimal(value))

    @classmethod
    def fixed(cls, amount_cents: int) -> CommissionTerms:
        return cls(CommissionType.FIXED, Decimal(amount_cents))


@dataclass(frozen=True, slots=True)
class AffiliateLink:
    """An affiliate linked to the checkout with its own terms."""

    affiliate_id: str
    terms: CommissionTerms


@dataclass(frozen=True, slots=True)
class AttributionEvent:
    """One arrival of a customer through an affiliate referral.

    ``occurred_at`` is stored as UTC epoch seconds so events from different
    sources order against each other. Naive datetimes are read as UTC.
    """

    affiliate_id: str
    occurred_at: datetime | float
    session_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "occurred_at", _epoch_seconds(self.occurred_at))


@dataclass(frozen=True, slots=True)
class PartnerCommission:
    party_id: str
    terms: CommissionTerms


@dataclass(frozen=True, slots=True)
class PartnerTerms:
    """Fixed partners that earn on every sale of the checkout."""

    industry: PartnerCommission | None = None
    factory: PartnerCommission | None = None
    coproducer: PartnerCommission | None = None

    def configured(self) -> tuple[tuple[PartyKind, PartnerCommission], ...]:
        """Configured partners in ledger order."""
        slots = (
            (PartyKind.INDUSTRY, self.industry),
            (PartyKind.FACTORY, self.factory),
            (PartyKind.COPRODUCER, self.coproducer),
        )
        return tuple((kind, partner) for kind, partner in slots if partner is not None)


# ---------------------------------------------------------------------------
# Request and results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OrderSettlementRequest:
    """Everything needed to settle one order.

    Callers build this DTO from the checkout, the tenant snapshot and the
    attribution stream, then hand it to ``settle``.
    """

    main_line: OrderLine
    payment_method: PaymentMethod | str
    bump_line: OrderBumpLine | None = None
    installments: int = 1
    pix_discount_pct: Decimal = Decimal(0)
    shipping_spec: ShippingSpec = field(default_factory=ShippingSpec)
    attribution_events: tuple[AttributionEvent, ...] = ()
    attribution_model: AttributionModel = AttributionModel.LAST_CLICK
    session_id: str | None = None
    affiliate_links: tuple[AffiliateLink, ...] = ()
    partner_terms: PartnerTerms = field(default_factory=PartnerTerms)
    tenant: TenantPricingConfig = field(default_factory=TenantPricingConfig)

    def __post_init__(self) -> None:
        percent = _decimal_or_error(self.pix_discount_pct, field_name="pix_discount_pct")
        object.__setattr__(self, "pix_discount_pct", percent)
        object.__setattr__(self, "attribution_events", _as_tuple(self.attribution_events))
        object.__setattr__(self, "affiliate_links", _as_tuple(self.affiliate_links))


@dataclass(frozen=True, slots=True)
class CommissionLedgerEntry:
    party_kind: PartyKind
    party_id: str
    commission_type: CommissionType
    commission_value: Decimal
    computed_amount_cents: int
    capped: bool = False


@dataclass(frozen=True, slots=True)
class ChargeSchedule:
    """What the customer is charged, and how it is split into installments."""

    payment_method: PaymentMethod
    installments: int
    raw_subtotal_cents: int
    discounted_subtotal_cents: int
    shipping_cents: int
    total_cents: int
    payable_cents: int
    per_installment_cents: int
    installment_amounts: tuple[int, ...]
    has_interest: bool
    shipping_visible: bool = False

    @property
    def interest_cents(self) -> int:
        return self.payable_cents - self.total_cents


@dataclass(frozen=True, slots=True)
class OrderSettlementResult:
    charge: ChargeSchedule
    commissionable_base_cents: int
    resolved_affiliate_id: str | None
    commissions: tuple[CommissionLedgerEntry, ...] = ()

    @property
    def total_commission_cents(self) -> int:
        return sum(entry.computed_amount_cents for entry in self.commissions)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _decimal_or_error(value: Percent, *, field_name: str) -> Decimal:
    try:
        return to_decimal(value)
    except ValueError as exc:
        raise InvalidDiscountPercent(
            f"{field_name} is not numeric", field=field_name, value=str(value)
        ) from exc


def _percent_or_error(value: Percent, *, field_name: str) -> Decimal:
    percent = _decimal_or_error(value, field_name=field_name)
    if not is_valid_discount(percent):
        raise InvalidDiscountPercent(
            f"{field_name} must be in [0, 100)", field=field_name, value=str(percent)
        )
    return percent


def _epoch_seconds(value: datetime | float) -> float:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.timestamp()
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidAttributionEvent(
            "Attribution timestamp must be a datetime or epoch seconds",
            occurred_at=str(value),
        )
    seconds = float(value)
    if not math.isfinite(seconds):
        raise InvalidAttributionEvent(
            "Attribution timestamp must be finite", occurred_at=str(value)
        )
    return seconds


def _as_tuple(items: Iterable[object]) -> tuple:  # type: ignore[type-arg]
    return items if isinstance(items, tuple) else tuple(items)
