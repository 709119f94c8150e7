"""
Money conversion helpers.

Amounts enter the system as JSON numbers or numeric strings and are turned
into ``Decimal`` values with two places straight away. They leave the
system as two-place strings. Nothing in between uses floats.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from finsync.utils.errors import ValidationError

CENTS = Decimal('0.01')
ZERO = Decimal('0.00')
MAX_AMOUNT = Decimal('100000000')


def to_money(value, field: str = 'amount', allow_negative: bool = False) -> Decimal:
    """Parse ``value`` into a two-place ``Decimal``.

    Raises:
        ValidationError: if the value is missing, not numeric, not finite,
            negative when ``allow_negative`` is False, or too large to store.
    """
    if value is None or value == '':
        raise ValidationError(f'{field} is required', field=field)

    # bool is an int subclass; True must not become 1.00
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number', field=field)

    try:
        if isinstance(value, float):
            amount = Decimal(str(value))
        else:
            amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f'{field} must be a number', field=field)

    if not amount.is_finite():
        raise ValidationError(f'{field} must be a number', field=field)

    if amount < 0 and not allow_negative:
        raise ValidationError(f'{field} must not be negative', field=field)

    # Columns are Numeric(10, 2)
    try:
        amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f'{field} is too large', field=field)
    if abs(amount) >= MAX_AMOUNT:
        raise ValidationError(f'{field} is too large', field=field)

    return amount


def quantize(value) -> Decimal:
    """Normalise a stored amount (may come back unquantised from SQLite)."""
    if value is None:
        return ZERO
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value) -> Optional[str]:
    """Render an amount for JSON output, e.g. ``Decimal('1200')`` -> ``'1200.00'``."""
    if value is None:
        return None
    return str(quantize(value))
