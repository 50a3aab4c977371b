"""Value objects exchanged between the billing services and their callers."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from condo_billing.core.errors import ValidationError
from condo_billing.core.money import quantize_amount, round_currency, to_amount

MONTH_NAMES: tuple[str, ...] = (
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
)

MIN_YEAR = 1900
MAX_YEAR = 9999

_PERIOD_KEY = re.compile(r"^(\d{4})-(\d{1,2})$")

MONETARY_FIELDS: tuple[str, ...] = (
    "net_salary",
    "social_security",
    "union_contribution",
    "other_deductions",
)
OPTIONAL_FIELDS = frozenset({"other_deductions"})


class PaymentStatus(str, Enum):
    """Settlement state of an employee payment."""

    PENDING = "pending"
    PAID = "paid"

    @classmethod
    def parse(cls, value: object) -> "PaymentStatus":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(status.value for status in cls)
            raise ValidationError(
                f"status must be one of: {allowed}", field="status"
            ) from None


def _to_int(value: object, field: str) -> int:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required", field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    raise ValidationError(f"{field} must be a whole number", field=field)


def _decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal(0)
    return Decimal(str(value))


@dataclass(frozen=True, slots=True, order=True)
class CompensationPeriod:
    """One payroll cycle: a calendar month of a given year."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValidationError("month must be between 1 and 12", field="month")
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValidationError(
                f"year must be between {MIN_YEAR} and {MAX_YEAR}", field="year"
            )

    @classmethod
    def of(cls, month: object, year: object) -> "CompensationPeriod":
        return cls(year=_to_int(year, "year"), month=_to_int(month, "month"))

    @classmethod
    def parse(cls, value: object) -> "CompensationPeriod":
        """Accept a period, a ``YYYY-MM`` key, or a mapping with month/year."""

        if isinstance(value, CompensationPeriod):
            return value
        if isinstance(value, str):
            match = _PERIOD_KEY.match(value.strip())
            if match is None:
                raise ValidationError(
                    "period must use the YYYY-MM format", field="period"
                )
            return cls.of(match.group(2), match.group(1))
        if isinstance(value, Mapping):
            return cls.of(value.get("month"), value.get("year"))
        raise ValidationError("period is required", field="period")

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"


@dataclass(frozen=True, slots=True)
class CompensationInput:
    """Validated monetary inputs of one monthly compensation."""

    net_salary: Decimal
    social_security: Decimal
    union_contribution: Decimal
    other_deductions: Decimal

    @classmethod
    def from_fields(cls, fields: Mapping[str, object]) -> "CompensationInput":
        """Validate raw form values.

        ``other_deductions`` defaults to zero; the remaining amounts are
        required. Every amount must be zero or positive and is rounded to the
        four decimals the amounts are stored with, so the total matches the
        stored figures.
        """
        values: dict[str, Decimal] = {}
        for name in MONETARY_FIELDS:
            amount = to_amount(fields.get(name), name)
            if amount is None:
                if name not in OPTIONAL_FIELDS:
                    raise ValidationError(f"{name} is required", field=name)
                amount = Decimal(0)
            if amount < 0:
                raise ValidationError(f"{name} cannot be negative", field=name)
            values[name] = quantize_amount(amount)
        return cls(**values)

    @property
    def total(self) -> Decimal:
        """Credits minus deductions, rounded once at the currency boundary."""

        return round_currency(
            self.net_salary
            + self.social_security
            + self.union_contribution
            - self.other_deductions
        )


@dataclass(frozen=True, slots=True)
class CompensationRecord:
    id: str
    employee_id: str
    net_salary: Decimal
    social_security: Decimal
    union_contribution: Decimal
    other_deductions: Decimal
    total_compensation: Decimal
    month: int
    year: int
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CompensationRecord":
        return cls(
            id=str(row["id"]),
            employee_id=str(row["employee_id"]),
            net_salary=_decimal(row.get("net_salary")),
            social_security=_decimal(row.get("social_security")),
            union_contribution=_decimal(row.get("union_contribution")),
            other_deductions=_decimal(row.get("other_deductions")),
            total_compensation=_decimal(row.get("total_compensation")),
            month=int(row["month"]),
            year=int(row["year"]),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    @property
    def period(self) -> CompensationPeriod:
        return CompensationPeriod(year=self.year, month=self.month)


@dataclass(frozen=True, slots=True)
class PaymentRecord:
    id: str
    compensation_id: str | None
    employee_id: str
    condominium_id: str
    month: int
    year: int
    base_salary: Decimal
    social_security: Decimal
    union_fee: Decimal
    deductions: Decimal
    total_amount: Decimal
    payment_date: date | None
    status: PaymentStatus

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PaymentRecord":
        compensation_id = row.get("compensation_id")
        return cls(
            id=str(row["id"]),
            compensation_id=None if compensation_id is None else str(compensation_id),
            employee_id=str(row["employee_id"]),
            condominium_id=str(row["condominium_id"]),
            month=int(row["month"]),
            year=int(row["year"]),
            base_salary=_decimal(row.get("base_salary")),
            social_security=_decimal(row.get("social_security")),
            union_fee=_decimal(row.get("union_fee")),
            deductions=_decimal(row.get("deductions")),
            total_amount=_decimal(row.get("total_amount")),
            payment_date=row.get("payment_date"),
            status=PaymentStatus(row.get("status") or PaymentStatus.PENDING.value),
        )


@dataclass(frozen=True, slots=True)
class SavedCompensation:
    """Both halves of a monthly compensation event after a successful save."""

    compensation: CompensationRecord
    payment: PaymentRecord
    created: bool


@dataclass(frozen=True, slots=True)
class DeletedCompensation:
    compensation_id: str
    payments_deleted: int


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Memberships written by a reconciliation pass."""

    added: frozenset[str]
    removed: frozenset[str]

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


@dataclass(frozen=True, slots=True)
class PayrollSummary:
    condominium_id: str
    period_label: str
    payment_count: int
    total: Decimal
    formatted_total: str
