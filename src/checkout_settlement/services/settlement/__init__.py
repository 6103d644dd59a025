"""Settlement service: charge schedule and commission ledger for one order."""

from __future__ import annotations

from checkout_settlement.services.settlement.logger import SettlementLogger
from checkout_settlement.services.settlement.service import SettlementService, settle

__all__ = [
    "SettlementLogger",
    "SettlementService",
    "settle",
]
