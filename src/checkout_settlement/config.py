"""Tenant pricing configuration loaders.

The settlement core never reads configuration itself; these loaders build the
read-only ``TenantPricingConfig`` snapshot that callers pass in.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from checkout_settlement.core.errors import ConfigError, SettlementError
from checkout_settlement.core.types import (
    DEFAULT_MAX_INSTALLMENTS,
    InstallmentFeeTable,
    TenantPricingConfig,
)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def load_tenant_config(path: Path) -> TenantPricingConfig:
    """Load a tenant snapshot from a YAML file.

    Expected keys (all optional)::

        installment_fees: {2: 3.49, 3: 4.29}
        max_installments: 12
        fee_passed_to_buyer: true

    Missing keys fall back to the platform defaults.

    Raises:
        ConfigError: If the file is unreadable or a value is malformed.
    """
    try:
        raw = yaml.safe_load(path.read_text())
    except OSError as exc:
        raise ConfigError(f"Cannot read tenant config: {path}", path=str(path)) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in tenant config: {path}", path=str(path)) from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Tenant config must be a mapping", path=str(path))
    return tenant_config_from_dict(raw)


def tenant_config_from_dict(data: dict[str, Any]) -> TenantPricingConfig:
    """Build a tenant snapshot from an already-parsed mapping."""
    fees_raw = data.get("installment_fees")
    max_raw = data.get("max_installments", DEFAULT_MAX_INSTALLMENTS)
    passed_raw = data.get("fee_passed_to_buyer", True)

    if fees_raw is not None and not isinstance(fees_raw, dict):
        raise ConfigError("installment_fees must be a mapping of count to percent")
    try:
        if fees_raw is None:
            fee_table = InstallmentFeeTable.default()
        else:
            fee_table = InstallmentFeeTable.from_mapping(fees_raw)
    except SettlementError as exc:
        raise ConfigError(
            f"Invalid installment fee table: {exc.message}", **exc.details
        ) from exc

    if isinstance(max_raw, bool) or not isinstance(max_raw, int):
        raise ConfigError(
            "max_installments must be an integer", max_installments=str(max_raw)
        )
    if not isinstance(passed_raw, bool):
        raise ConfigError(
            "fee_passed_to_buyer must be a boolean",
            fee_passed_to_buyer=str(passed_raw),
        )

    return TenantPricingConfig(
        installment_fees=fee_table,
        max_installments=max_raw,
        fee_passed_to_buyer=passed_raw,
    )


def load_tenant_config_from_env() -> TenantPricingConfig:
    """Load a tenant snapshot from environment variables.

    SETTLEMENT_MAX_INSTALLMENTS: integer, default 12
    SETTLEMENT_FEE_PASSED_TO_BUYER: true/false, default true
    SETTLEMENT_INSTALLMENT_FEES: ``"2:3.49,3:4.29"``, default platform table
    """
    max_value = os.environ.get("SETTLEMENT_MAX_INSTALLMENTS", "").strip()
    try:
        max_installments = int(max_value) if max_value else DEFAULT_MAX_INSTALLMENTS
    except ValueError as exc:
        raise ConfigError(
            "SETTLEMENT_MAX_INSTALLMENTS must be an integer",
            max_installments=max_value,
        ) from exc

    passed_value = os.environ.get("SETTLEMENT_FEE_PASSED_TO_BUYER", "true").strip().lower()
    if passed_value in _TRUTHY:
        fee_passed = True
    elif passed_value in _FALSY:
        fee_passed = False
    else:
        raise ConfigError(
            "SETTLEMENT_FEE_PASSED_TO_BUYER must be true or false",
            fee_passed_to_buyer=passed_value,
        )

    fees_value = os.environ.get("SETTLEMENT_INSTALLMENT_FEES", "").strip()
    fees: dict[str, str] | None = None
    if fees_value:
        fees = {}
        for pair in fees_value.split(","):
            count, sep, percent = pair.partition(":")
            if not sep:
                raise ConfigError(
                    "SETTLEMENT_INSTALLMENT_FEES entries must look like 3:4.29",
                    entry=pair.strip(),
                )
            fees[count.strip()] = percent.strip()

    return tenant_config_from_dict(
        {
            "installment_fees": fees,
            "max_installments": max_installments,
            "fee_passed_to_buyer": fee_passed,
        }
    )
