"""Credit-card installment pricing."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from checkout_settlement.core.errors import InvalidInstallmentCount
from checkout_settlement.core.money import apply_markup, split_with_remainder
from checkout_settlement.core.types import (
    DEFAULT_MAX_INSTALLMENTS,
    InstallmentFeeTable,
)


@dataclass(frozen=True, slots=True)
class InstallmentQuote:
    """Payable amount for one installment count."""

    installments: int
    payable_cents: int
    per_installment_cents: int
    installment_amounts: tuple[int, ...]
    has_interest: bool
    fee_percent: Decimal = Decimal(0)


def price_installments(
    base_cents: int,
    installments: int,
    fee_table: InstallmentFeeTable,
    fee_passed_to_buyer: bool,
    max_installments: int = DEFAULT_MAX_INSTALLMENTS,
) -> InstallmentQuote:
    """Price ``base_cents`` paid in ``installments`` card installments.

    When the fee is passed to the buyer the total grows by the table's fee for
    that count; otherwise the merchant absorbs it and the customer pays the
    base. The total is rounded once and the last installment absorbs the
    rounding remainder, so the installments always sum to ``payable_cents``.
    For tiny totals where ``round(payable / n)`` would leave the last
    installment negative, ``per_installment_cents`` is ``payable // n`` instead.

    Args:
        base_cents: Amount to be financed, shipping included
        installments: Number of installments chosen by the customer
        fee_table: Tenant fee percent per installment count
        fee_passed_to_buyer: Whether the fee increases the customer's total
        max_installments: Highest count the tenant allows

    Returns:
        InstallmentQuote for the requested count

    Raises:
        InvalidInstallmentCount: If ``installments`` is outside
            ``[1, max_installments]``.
    """
    if installments < 1 or installments > max_installments:
        raise InvalidInstallmentCount(
            f"Installments must be between 1 and {max_installments}",
            installments=installments,
            max_installments=max_installments,
        )

    if installments == 1:
        return InstallmentQuote(
            installments=1,
            payable_cents=base_cents,
            per_installment_cents=base_cents,
            installment_amounts=(base_cents,),
            has_interest=False,
        )

    fee_percent = Decimal(0)
    payable = base_cents
    if fee_passed_to_buyer:
        fee_percent = fee_table.fee_for(installments)
        payable = apply_markup(base_cents, fee_percent)

    amounts = split_with_remainder(payable, installments)
    return InstallmentQuote(
        installments=installments,
        payable_cents=payable,
        per_installment_cents=amounts[0],
        installment_amounts=amounts,
        has_interest=fee_percent > 0,
        fee_percent=fee_percent,
    )


def installment_options(
    base_cents: int,
    fee_table: InstallmentFeeTable,
    fee_passed_to_buyer: bool,
    max_installments: int = DEFAULT_MAX_INSTALLMENTS,
) -> list[InstallmentQuote]:
    """Quote every installment count from 1 to ``max_installments``."""
    return [
        price_installments(
            base_cents,
            count,
            fee_table,
            fee_passed_to_buyer,
            max_installments=max_installments,
        )
        for count in range(1, max_installments + 1)
    ]
