from decimal import Decimal

import pytest

from condo_billing.core.errors import ValidationError
from condo_billing.core.money import format_currency, quantize_amount, round_currency, to_amount


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1180.555", "1180.56"),
        ("1180.545", "1180.55"),
        ("-0.005", "-0.01"),
        ("-150.125", "-150.13"),
        ("2400", "2400.00"),
    ],
)
def test_round_currency_rounds_half_away_from_zero(raw: str, expected: str) -> None:
    """Halves move away from zero on both sides of it."""

    assert round_currency(Decimal(raw)) == Decimal(expected)


def test_to_amount_accepts_form_values() -> None:
    """Strings, ints, floats and decimals all become exact decimals."""

    assert to_amount("150.555", "net_salary") == Decimal("150.555")
    assert to_amount(" 20 ", "net_salary") == Decimal("20")
    assert to_amount(150.555, "net_salary") == Decimal("150.555")
    assert to_amount(7, "net_salary") == Decimal("7")
    assert to_amount(Decimal("1.10"), "net_salary") == Decimal("1.10")


def test_to_amount_reports_missing_as_none() -> None:
    assert to_amount(None, "net_salary") is None
    assert to_amount("   ", "net_salary") is None


@pytest.mark.parametrize("raw", ["abc", True, float("nan"), "Infinity", object()])
def test_to_amount_rejects_non_numbers(raw: object) -> None:
    """Anything that is not a finite number is a validation failure."""

    with pytest.raises(ValidationError) as excinfo:
        to_amount(raw, "social_security")

    assert excinfo.value.field == "social_security"


def test_format_currency_matches_console_display() -> None:
    """Dot groups thousands and comma marks decimals."""

    assert format_currency(Decimal("1234.56")) == "$ 1.234,56"
    assert format_currency(Decimal("1234567.891")) == "$ 1.234.567,89"
    assert format_currency(Decimal("-12.5")) == "-$ 12,50"
    assert format_currency(0) == "$ 0,00"
    assert format_currency(Decimal("-0.001")) == "$ 0,00"
    assert format_currency(Decimal("99.995"), symbol="ARS") == "ARS 100,00"


def test_quantize_amount_keeps_four_decimals() -> None:
    assert quantize_amount(Decimal("150.555")) == Decimal("150.555")
    assert quantize_amount(Decimal("0.00496")) == Decimal("0.0050")
    assert quantize_amount(Decimal("1.00005")) == Decimal("1.0001")
