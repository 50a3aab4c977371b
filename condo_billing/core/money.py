"""Decimal helpers for monetary amounts at the currency boundary."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .errors import ValidationError

CENT = Decimal("0.01")
# scale of the stored itemised amounts
AMOUNT_STEP = Decimal("0.0001")


def to_amount(value: object, field: str) -> Decimal | None:
    """Coerce a raw form value into a finite ``Decimal``.

    Returns ``None`` when the value is missing (``None`` or blank text) so the
    caller decides whether the field is required. Floats go through ``str`` to
    keep the digits the user typed.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise ValidationError(f"{field} must be a number", field=field) from None
    else:
        raise ValidationError(f"{field} must be a number", field=field)

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    return amount


def quantize_amount(value: Decimal) -> Decimal:
    """Round an itemised amount to the stored scale, halves away from zero."""

    return value.quantize(AMOUNT_STEP, rounding=ROUND_HALF_UP)


def round_currency(value: Decimal) -> Decimal:
    """Round to cents, halves away from zero."""

    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(value: int | float | Decimal, symbol: str = "$") -> str:
    """Format an amount the way the console displays it: ``$ 1.234,56``."""

    amount = round_currency(Decimal(str(value)))
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(amount):,.2f}"
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{symbol} {localized}"
