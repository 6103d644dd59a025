"""Logging for settlement runs.

Keeps log formatting out of the settlement pipeline itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import loguru
from loguru import logger

if TYPE_CHECKING:
    from checkout_settlement.core.errors import SettlementError
    from checkout_settlement.core.types import (
        CommissionLedgerEntry,
        OrderSettlementResult,
    )
    from checkout_settlement.pricing.installments import InstallmentQuote
    from checkout_settlement.pricing.shipping import ShippingAdjustment
    from checkout_settlement.pricing.subtotal import Subtotal


class SettlementLogger:
    """Handles all logging for settlement with business logic separated."""

    def __init__(self, logger_instance: loguru.Logger = logger) -> None:
        self._logger = logger_instance

    def settlement_started(self, payment_method: str, installments: int) -> None:
        self._logger.bind(
            payment_method=payment_method, installments=installments
        ).debug("Settling order: {} in {}x", payment_method, installments)

    def subtotal_built(self, subtotal: Subtotal) -> None:
        self._logger.bind(
            raw_subtotal_cents=subtotal.raw_subtotal_cents,
            discounted_subtotal_cents=subtotal.discounted_subtotal_cents,
            bump_cents=subtotal.bump_cents,
        ).debug(
            "Subtotal {} -> {} cents (bump {} cents)",
            subtotal.raw_subtotal_cents,
            subtotal.discounted_subtotal_cents,
            subtotal.bump_cents,
        )

    def shipping_applied(self, adjustment: ShippingAdjustment) -> None:
        self._logger.bind(
            shipping_cents=adjustment.shipping_cents,
            total_cents=adjustment.total_cents,
            commissionable_base_cents=adjustment.commissionable_base_cents,
        ).debug(
            "Shipping {} cents, total {} cents, commissionable base {} cents",
            adjustment.shipping_cents,
            adjustment.total_cents,
            adjustment.commissionable_base_cents,
        )

    def installments_priced(self, quote: InstallmentQuote) -> None:
        self._logger.bind(
            installments=quote.installments,
            payable_cents=quote.payable_cents,
            fee_percent=str(quote.fee_percent),
        ).debug(
            "{}x of {} cents, payable {} cents (fee {}%)",
            quote.installments,
            quote.per_installment_cents,
            quote.payable_cents,
            quote.fee_percent,
        )

    def affiliate_resolved(self, affiliate_id: str | None, model: str) -> None:
        if affiliate_id is None:
            self._logger.bind(model=model).debug("No affiliate attributed")
            return
        self._logger.bind(affiliate_id=affiliate_id, model=model).debug(
            "Affiliate {} attributed ({})", affiliate_id, model
        )

    def affiliate_unlinked(self, affiliate_id: str) -> None:
        self._logger.bind(affiliate_id=affiliate_id).debug(
            "Affiliate {} is not linked to this checkout; no affiliate commission",
            affiliate_id,
        )

    def ledger_built(self, entries: tuple[CommissionLedgerEntry, ...]) -> None:
        for entry in entries:
            self._logger.bind(
                party_kind=entry.party_kind.value,
                party_id=entry.party_id,
                amount_cents=entry.computed_amount_cents,
                capped=entry.capped,
            ).debug(
                "  {} {}: {} cents{}",
                entry.party_kind.value,
                entry.party_id,
                entry.computed_amount_cents,
                " (capped)" if entry.capped else "",
            )

    def settlement_failed(self, error: SettlementError) -> None:
        self._logger.bind(code=error.code, **error.details).warning(
            "Settlement rejected: {} ({})", error.message, error.code
        )

    def settlement_completed(self, result: OrderSettlementResult) -> None:
        self._logger.bind(
            payable_cents=result.charge.payable_cents,
            commissionable_base_cents=result.commissionable_base_cents,
            commission_count=len(result.commissions),
            total_commission_cents=result.total_commission_cents,
        ).info(
            "Order settled: payable {} cents, {} commission entries ({} cents)",
            result.charge.payable_cents,
            len(result.commissions),
            result.total_commission_cents,
        )
