"""Payout side: affiliate attribution and the commission ledger."""

from __future__ import annotations

from checkout_settlement.commissions.attribution import resolve_affiliate
from checkout_settlement.commissions.ledger import (
    build_ledger,
    compute_commission_cents,
    find_affiliate_link,
)

__all__ = [
    "build_ledger",
    "compute_commission_cents",
    "find_affiliate_link",
    "resolve_affiliate",
]
