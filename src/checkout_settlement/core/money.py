"""Integer-cents arithmetic with a single rounding rule.

Amounts are ``int`` cents. Percentages are ``Decimal`` and every product or
quotient is rounded exactly once, half-up, back to whole cents.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ONE = Decimal("1")
HUNDRED = Decimal("100")

Percent = Decimal | int | float | str


def to_decimal(value: Percent) -> Decimal:
    """Convert a percentage-like value to ``Decimal`` without float artifacts.

    Floats go through ``str()`` so ``8.99`` stays ``Decimal("8.99")``.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric value: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(str(value).strip().replace(",", "."))
        except InvalidOperation as exc:
            raise ValueError(f"Not a numeric value: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Not a finite value: {value!r}")
    return result


def round_half_up(value: Decimal) -> int:
    """Round a Decimal amount to whole cents, ties away from zero."""
    return int(value.quantize(ONE, rounding=ROUND_HALF_UP))


def percent_of(amount_cents: int, percent: Percent) -> int:
    """Return ``round(amount * percent / 100)``."""
    return round_half_up(Decimal(amount_cents) * to_decimal(percent) / HUNDRED)


def apply_discount(amount_cents: int, percent: Percent) -> int:
    """Return ``round(amount * (1 - percent / 100))``."""
    factor = ONE - to_decimal(percent) / HUNDRED
    return round_half_up(Decimal(amount_cents) * factor)


def apply_markup(amount_cents: int, percent: Percent) -> int:
    """Return ``round(amount * (1 + percent / 100))``."""
    factor = ONE + to_decimal(percent) / HUNDRED
    return round_half_up(Decimal(amount_cents) * factor)


def divide(amount_cents: int, parts: int) -> int:
    """Return ``round(amount / parts)``."""
    if parts < 1:
        raise ValueError(f"parts must be >= 1, got {parts}")
    return round_half_up(Decimal(amount_cents) / Decimal(parts))


def split_with_remainder(total_cents: int, parts: int) -> tuple[int, ...]:
    """Split ``total_cents`` into ``parts`` installments that sum exactly.

    The first ``parts - 1`` installments are ``round(total / parts)`` and the
    last one absorbs the remainder. When the rounded value would leave the
    last installment negative (totals below roughly ``parts**2 / 2`` cents),
    the floor of the division is used instead.
    """
    if parts < 1:
        raise ValueError(f"parts must be >= 1, got {parts}")
    per_part = divide(total_cents, parts)
    if per_part * (parts - 1) > total_cents:
        per_part = total_cents // parts
    last = total_cents - per_part * (parts - 1)
    return (per_part,) * (parts - 1) + (last,)


def is_valid_discount(percent: Decimal) -> bool:
    """Discounts and fees live in ``[0, 100)``."""
    return Decimal(0) <= percent < HUNDRED


def format_brl(amount_cents: int) -> str:
    """Render cents as ``R$ 1.234,56``."""
    sign = "-" if amount_cents < 0 else ""
    reais, cents = divmod(abs(amount_cents), 100)
    grouped = f"{reais:,}".replace(",", ".")
    return f"{sign}R$ {grouped},{cents:02d}"
