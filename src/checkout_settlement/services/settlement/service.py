"""Order settlement: charge schedule and commission ledger in one call."""

from __future__ import annotations

from dataclasses import replace

from checkout_settlement.commissions.attribution import resolve_affiliate
from checkout_settlement.commissions.ledger import build_ledger, find_affiliate_link
from checkout_settlement.core.errors import InvalidInstallmentCount, SettlementError
from checkout_settlement.core.types import (
    ChargeSchedule,
    OrderSettlementRequest,
    OrderSettlementResult,
    PaymentMethod,
    TenantPricingConfig,
)
from checkout_settlement.pricing.installments import price_installments
from checkout_settlement.pricing.shipping import apply_shipping
from checkout_settlement.pricing.subtotal import build_subtotal
from checkout_settlement.services.settlement.logger import SettlementLogger

_default_logger = SettlementLogger()


def settle(
    request: OrderSettlementRequest,
    *,
    log: SettlementLogger | None = None,
) -> OrderSettlementResult:
    """Settle one order.

    Runs validate -> subtotal -> shipping -> installment pricing ->
    attribution -> ledger. Any failure aborts the whole settlement; there is
    no partial result.

    Args:
        request: Fully-specified settlement request.
        log: Logger override (defaults to the module logger).

    Returns:
        OrderSettlementResult with the charge schedule and commission ledger.

    Raises:
        SettlementError: Any validation failure, with a typed subclass.
    """
    log = log or _default_logger
    try:
        return _settle(request, log)
    except SettlementError as exc:
        log.settlement_failed(exc)
        raise


def _settle(request: OrderSettlementRequest, log: SettlementLogger) -> OrderSettlementResult:
    method = PaymentMethod.parse(request.payment_method)
    tenant = request.tenant
    _validate_installments(method, request.installments, tenant)
    log.settlement_started(method.value, request.installments)

    subtotal = build_subtotal(
        request.main_line, request.bump_line, method, request.pix_discount_pct
    )
    log.subtotal_built(subtotal)

    adjustment = apply_shipping(subtotal.discounted_subtotal_cents, request.shipping_spec)
    log.shipping_applied(adjustment)

    # Only card payments are financed; other methods pay the total at once.
    count = request.installments if method is PaymentMethod.CREDIT_CARD else 1
    quote = price_installments(
        adjustment.total_cents,
        count,
        tenant.installment_fees,
        tenant.fee_passed_to_buyer,
        max_installments=tenant.max_installments,
    )
    log.installments_priced(quote)

    affiliate_id = resolve_affiliate(
        request.attribution_events,
        request.attribution_model,
        session_id=request.session_id,
    )
    log.affiliate_resolved(affiliate_id, request.attribution_model.value)
    link = find_affiliate_link(affiliate_id, request.affiliate_links)
    if affiliate_id is not None and link is None:
        log.affiliate_unlinked(affiliate_id)

    commissions = build_ledger(
        adjustment.commissionable_base_cents,
        affiliate_id,
        request.affiliate_links,
        request.partner_terms,
    )
    log.ledger_built(commissions)

    charge = ChargeSchedule(
        payment_method=method,
        installments=quote.installments,
        raw_subtotal_cents=subtotal.raw_subtotal_cents,
        discounted_subtotal_cents=subtotal.discounted_subtotal_cents,
        shipping_cents=adjustment.shipping_cents,
        total_cents=adjustment.total_cents,
        payable_cents=quote.payable_cents,
        per_installment_cents=quote.per_installment_cents,
        installment_amounts=quote.installment_amounts,
        has_interest=quote.has_interest,
        shipping_visible=adjustment.shipping_visible,
    )
    result = OrderSettlementResult(
        charge=charge,
        commissionable_base_cents=adjustment.commissionable_base_cents,
        resolved_affiliate_id=link.affiliate_id if link is not None else None,
        commissions=commissions,
    )
    log.settlement_completed(result)
    return result


def _validate_installments(
    method: PaymentMethod, installments: int, tenant: TenantPricingConfig
) -> None:
    if installments < 1 or installments > tenant.max_installments:
        raise InvalidInstallmentCount(
            f"Installments must be between 1 and {tenant.max_installments}",
            installments=installments,
            max_installments=tenant.max_installments,
        )
    if installments > 1 and method is not PaymentMethod.CREDIT_CARD:
        raise InvalidInstallmentCount(
            f"{method.value} does not accept installments",
            installments=installments,
            payment_method=method.value,
        )


class SettlementService:
    """Settles orders against one tenant's pricing snapshot.

    Callers construct a service per tenant snapshot, then call ``settle``
    for each request. Requests carrying their own tenant snapshot are
    re-bound to the service's.
    """

    def __init__(
        self,
        *,
        tenant: TenantPricingConfig,
        log: SettlementLogger | None = None,
    ) -> None:
        self._tenant = tenant
        self._log = log or _default_logger

    @property
    def tenant(self) -> TenantPricingConfig:
        return self._tenant

    def settle(self, request: OrderSettlementRequest) -> OrderSettlementResult:
        if request.tenant != self._tenant:
            request = replace(request, tenant=self._tenant)
        return settle(request, log=self._log)
