"""Tests for tenant pricing configuration loaders."""

from __future__ import annotations

from decimal import Decimal

import pytest

from checkout_settlement.config import (
    load_tenant_config,
    load_tenant_config_from_env,
    tenant_config_from_dict,
)
from checkout_settlement.core.errors import ConfigError
from checkout_settlement.core.types import InstallmentFeeTable

_ENV_VARS = (
    "SETTLEMENT_MAX_INSTALLMENTS",
    "SETTLEMENT_FEE_PASSED_TO_BUYER",
    "SETTLEMENT_INSTALLMENT_FEES",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestLoadTenantConfig:
    def test_reads_yaml(self, tmp_path) -> None:
        path = tmp_path / "tenant.yaml"
        path.write_text(
            "installment_fees:\n  2: 2.5\n  3: 4.29\n"
            "max_installments: 6\n"
            "fee_passed_to_buyer: false\n"
        )

        tenant = load_tenant_config(path)

        assert tenant.installment_fees.as_dict() == {2: Decimal("2.5"), 3: Decimal("4.29")}
        assert tenant.max_installments == 6
        assert tenant.fee_passed_to_buyer is False

    def test_empty_file_uses_defaults(self, tmp_path) -> None:
        path = tmp_path / "tenant.yaml"
        path.write_text("")

        tenant = load_tenant_config(path)

        assert tenant.installment_fees == InstallmentFeeTable.default()
        assert tenant.max_installments == 12
        assert tenant.fee_passed_to_buyer is True

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_tenant_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path) -> None:
        path = tmp_path / "tenant.yaml"
        path.write_text("installment_fees: [2: 3\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_tenant_config(path)

    def test_non_mapping_document(self, tmp_path) -> None:
        path = tmp_path / "tenant.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_tenant_config(path)


class TestTenantConfigFromDict:
    def test_fee_table_errors_become_config_errors(self) -> None:
        with pytest.raises(ConfigError, match="Invalid installment fee table") as exc_info:
            tenant_config_from_dict({"installment_fees": {3: 120}})

        assert exc_info.value.details["field"] == "installment_fees.3"

    @pytest.mark.parametrize("key", [2.7, "2.5"])
    def test_fractional_fee_key_rejected(self, key) -> None:
        with pytest.raises(ConfigError, match="Invalid installment fee table") as exc_info:
            tenant_config_from_dict({"installment_fees": {key: 5}})

        assert exc_info.value.details == {"installments": str(key)}

    def test_fractional_fee_key_in_yaml(self, tmp_path) -> None:
        path = tmp_path / "tenant.yaml"
        path.write_text("installment_fees:\n  2.7: 5\n")

        with pytest.raises(ConfigError, match="not an installment count"):
            load_tenant_config(path)

    def test_fees_must_be_mapping(self) -> None:
        with pytest.raises(ConfigError, match="installment_fees"):
            tenant_config_from_dict({"installment_fees": [3.49, 4.29]})

    @pytest.mark.parametrize("value", ["12", True, 3.5])
    def test_max_installments_must_be_int(self, value) -> None:
        with pytest.raises(ConfigError, match="max_installments"):
            tenant_config_from_dict({"max_installments": value})

    def test_max_installments_range(self) -> None:
        with pytest.raises(ConfigError, match="between 1 and 24"):
            tenant_config_from_dict({"max_installments": 30})

    def test_fee_passed_must_be_bool(self) -> None:
        with pytest.raises(ConfigError, match="fee_passed_to_buyer"):
            tenant_config_from_dict({"fee_passed_to_buyer": "yes"})


class TestLoadTenantConfigFromEnv:
    def test_defaults(self, clean_env) -> None:
        tenant = load_tenant_config_from_env()

        assert tenant.max_installments == 12
        assert tenant.fee_passed_to_buyer is True
        assert tenant.installment_fees == InstallmentFeeTable.default()

    def test_reads_all_vars(self, clean_env) -> None:
        clean_env.setenv("SETTLEMENT_MAX_INSTALLMENTS", "3")
        clean_env.setenv("SETTLEMENT_FEE_PASSED_TO_BUYER", "False")
        clean_env.setenv("SETTLEMENT_INSTALLMENT_FEES", "2:3.49, 3:4.29")

        tenant = load_tenant_config_from_env()

        assert tenant.max_installments == 3
        assert tenant.fee_passed_to_buyer is False
        assert tenant.installment_fees.as_dict() == {
            2: Decimal("3.49"),
            3: Decimal("4.29"),
        }

    def test_non_integer_max(self, clean_env) -> None:
        clean_env.setenv("SETTLEMENT_MAX_INSTALLMENTS", "twelve")

        with pytest.raises(ConfigError, match="SETTLEMENT_MAX_INSTALLMENTS"):
            load_tenant_config_from_env()

    def test_bad_boolean(self, clean_env) -> None:
        clean_env.setenv("SETTLEMENT_FEE_PASSED_TO_BUYER", "maybe")

        with pytest.raises(ConfigError, match="SETTLEMENT_FEE_PASSED_TO_BUYER"):
            load_tenant_config_from_env()

    def test_malformed_fee_entry(self, clean_env) -> None:
        clean_env.setenv("SETTLEMENT_INSTALLMENT_FEES", "2=3.49")

        with pytest.raises(ConfigError, match="3:4.29") as exc_info:
            load_tenant_config_from_env()

        assert exc_info.value.details == {"entry": "2=3.49"}
