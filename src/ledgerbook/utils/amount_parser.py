"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from ledgerbook.domain.errors import ValidationError


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "¥1,000"

    Amounts are magnitudes; the transaction type decides the direction, so
    the result must be positive.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValidationError: If amount string cannot be parsed or is not positive
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    cleaned = re.sub(r"[$€£¥,\s]", "", amount_str)

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValidationError(f"Could not parse amount '{amount_str}'") from None

    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"Amount must be a positive number, got '{amount_str}'")
    return amount
