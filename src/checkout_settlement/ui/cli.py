from __future__ import annotations

import json
from pathlib import Path
import sys
from typing import NoReturn

from dotenv import load_dotenv
from loguru import logger
from rich.console import Console
from rich.table import Table
import typer

from checkout_settlement.adapters.payload import load_request_file, result_to_dict
from checkout_settlement.config import load_tenant_config, load_tenant_config_from_env
from checkout_settlement.core.errors import SettlementError
from checkout_settlement.core.money import format_brl
from checkout_settlement.core.types import (
    CommissionType,
    OrderSettlementResult,
    TenantPricingConfig,
)
from checkout_settlement.pricing.installments import installment_options
from checkout_settlement.services.settlement import settle

# Load environment variables from .env
load_dotenv()

app = typer.Typer(
    help="Checkout settlement: order pricing and commission ledger CLI.",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log settlement steps"),
) -> None:
    """Configure logging before any command runs."""
    logger.remove()
    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} [{level}] {name}: {message}",
        level="DEBUG" if verbose else "WARNING",
    )


@app.command("settle")
def settle_cmd(
    request_file: Path = typer.Argument(..., help="JSON or YAML settlement request"),
    tenant_file: Path | None = typer.Option(
        None, "--tenant", help="Tenant pricing YAML (defaults to env/platform)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Settle one order and print its charge schedule and commission ledger."""
    try:
        tenant = _load_tenant(tenant_file)
        request = load_request_file(request_file, tenant)
        result = settle(request)
    except SettlementError as exc:
        _fail(exc)

    if as_json:
        typer.echo(json.dumps(result_to_dict(result), indent=2))
        return
    _render_result(result)


@app.command("installments")
def installments_cmd(
    amount_cents: int = typer.Argument(..., help="Amount to finance, in cents"),
    tenant_file: Path | None = typer.Option(
        None, "--tenant", help="Tenant pricing YAML (defaults to env/platform)"
    ),
) -> None:
    """List every installment option for an amount."""
    try:
        tenant = _load_tenant(tenant_file)
        options = installment_options(
            amount_cents,
            tenant.installment_fees,
            tenant.fee_passed_to_buyer,
            max_installments=tenant.max_installments,
        )
    except SettlementError as exc:
        _fail(exc)

    table = Table(title=f"Installments for {format_brl(amount_cents)}")
    table.add_column("Installments", justify="right")
    table.add_column("Per installment", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Fee %", justify="right")
    for option in options:
        table.add_row(
            f"{option.installments}x",
            format_brl(option.per_installment_cents),
            format_brl(option.payable_cents),
            f"{option.fee_percent}" if option.has_interest else "no interest",
        )
    console.print(table)


def _load_tenant(tenant_file: Path | None) -> TenantPricingConfig:
    if tenant_file is not None:
        return load_tenant_config(tenant_file)
    return load_tenant_config_from_env()


def _fail(exc: SettlementError) -> NoReturn:
    typer.echo(json.dumps({"error": exc.to_dict(), "message": exc.message}), err=True)
    raise typer.Exit(code=2)


def _render_result(result: OrderSettlementResult) -> None:
    charge = result.charge

    summary = Table(title="Charge", show_header=False)
    summary.add_column("Field")
    summary.add_column("Amount", justify="right")
    summary.add_row("Payment method", charge.payment_method.value)
    summary.add_row("Subtotal", format_brl(charge.raw_subtotal_cents))
    if charge.discounted_subtotal_cents != charge.raw_subtotal_cents:
        summary.add_row("Subtotal after PIX", format_brl(charge.discounted_subtotal_cents))
    if charge.shipping_visible:
        summary.add_row("Shipping", format_brl(charge.shipping_cents))
    summary.add_row("Total", format_brl(charge.total_cents))
    if charge.has_interest:
        summary.add_row("Interest", format_brl(charge.interest_cents))
    summary.add_row("Payable", format_brl(charge.payable_cents))
    summary.add_row(
        "Installments",
        " + ".join(format_brl(amount) for amount in charge.installment_amounts),
    )
    console.print(summary)

    ledger = Table(title=f"Commissions (base {format_brl(result.commissionable_base_cents)})")
    ledger.add_column("Party")
    ledger.add_column("Id")
    ledger.add_column("Terms")
    ledger.add_column("Amount", justify="right")
    for entry in result.commissions:
        terms = (
            f"{entry.commission_value}%"
            if entry.commission_type is CommissionType.PERCENTAGE
            else format_brl(int(entry.commission_value))
        )
        if entry.capped:
            terms += " (capped)"
        ledger.add_row(
            entry.party_kind.value,
            entry.party_id,
            terms,
            format_brl(entry.computed_amount_cents),
        )
    console.print(ledger)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
