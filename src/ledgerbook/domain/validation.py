"""Primitive field validation and ledger period helpers."""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Iterator, TypeVar

from ledgerbook.domain.errors import ValidationError

E = TypeVar("E", bound=Enum)

_PERIOD_RE = re.compile(r"^\d{4}-\d{2}$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CENT = Decimal("0.01")


def _to_decimal(value: Any, label: str) -> Decimal:
    """Convert ``value`` to a finite Decimal with at most two decimal places."""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {label}: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid {label}: {value!r}") from None
    if not amount.is_finite():
        raise ValidationError(f"Invalid {label}: {value!r}")
    # Stored as Numeric(14, 2); finer precision would be rounded away.
    try:
        exact = amount == amount.quantize(_CENT)
    except InvalidOperation:
        raise ValidationError(f"Invalid {label}: {value!r} is too large") from None
    if not exact:
        raise ValidationError(f"Invalid {label}: {value!r} has more than two decimal places")
    return amount


def validate_amount(value: Any) -> Decimal:
    """Return ``value`` as a Decimal, requiring it to be positive."""
    amount = _to_decimal(value, "amount")
    if amount <= 0:
        raise ValidationError(f"Amount must be positive, got {amount}")
    return amount


def validate_balance(value: Any) -> Decimal:
    """Return ``value`` as a Decimal, requiring it to be non-negative."""
    balance = _to_decimal(value, "balance")
    if balance < 0:
        raise ValidationError(f"Balance must not be negative, got {balance}")
    return balance


def validate_date(value: Any) -> date:
    """Accept a date or a strict YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and _DATE_RE.match(value):
        try:
            return datetime.strptime(value, "%Y-%m-%d").date()
        except ValueError:
            pass
    raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def validate_period(value: Any) -> str:
    """Accept a strict YYYY-MM period string and return it."""
    if isinstance(value, str) and _PERIOD_RE.match(value):
        month = int(value[5:7])
        if 1 <= month <= 12:
            return value
    raise ValidationError(f"Invalid period: {value!r} (expected YYYY-MM)")


def validate_name(value: Any, label: str = "name") -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid {label}: must be a non-empty string")
    return value.strip()


def validate_id(value: Any, label: str = "ID") -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Invalid {label}: {value!r} (expected a positive integer)")
    return value


def coerce_enum(enum_cls: type[E], value: Any, label: str) -> E:
    """Return the member of ``enum_cls`` matching ``value`` (member or code)."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {label}: {value!r} (expected one of: {choices})") from None


def period_of(value: date) -> str:
    """Return the YYYY-MM ledger period containing ``value``."""
    return value.strftime("%Y-%m")


def next_period(period: str) -> str:
    year, month = int(period[:4]), int(period[5:7])
    if month == 12:
        return f"{year + 1:04d}-01"
    return f"{year:04d}-{month + 1:02d}"


def iter_periods(start: str, end: str) -> Iterator[str]:
    """Yield every period from ``start`` through ``end`` inclusive.

    Raises:
        ValidationError: If either period is malformed or ``end`` precedes ``start``
    """
    start = validate_period(start)
    end = validate_period(end)
    if end < start:
        raise ValidationError(f"Invalid period range: {start} to {end}")
    current = start
    while current <= end:
        yield current
        current = next_period(current)
