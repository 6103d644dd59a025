"""Shared test fixtures."""

from __future__ import annotations

from decimal import Decimal

import pytest

from checkout_settlement.core.types import (
    InstallmentFeeTable,
    TenantPricingConfig,
)


@pytest.fixture
def fee_table() -> InstallmentFeeTable:
    """Small fee table: 2x at 3.49%, 3x at 4.29%."""
    return InstallmentFeeTable.from_mapping({2: Decimal("3.49"), 3: Decimal("4.29")})


@pytest.fixture
def tenant(fee_table: InstallmentFeeTable) -> TenantPricingConfig:
    return TenantPricingConfig(
        installment_fees=fee_table,
        max_installments=12,
        fee_passed_to_buyer=True,
    )
