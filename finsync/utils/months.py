"""
Month token helpers. A month is always a "YYYY-MM" string so per-month
lookups are equality matches.
"""

from datetime import datetime
from typing import Optional
import re

from finsync.utils.errors import ValidationError

MONTH_PATTERN = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


def current_month(now: Optional[datetime] = None) -> str:
    """Current calendar month from the server clock (UTC), read on every call."""
    now = now or datetime.utcnow()
    return now.strftime('%Y-%m')


def validate_month(month, field: str = 'month') -> str:
    """Return ``month`` unchanged if it is a valid token, else raise."""
    if not month:
        raise ValidationError(f'{field} is required', field=field)
    if not isinstance(month, str) or not MONTH_PATTERN.match(month):
        raise ValidationError(f'{field} must be in YYYY-MM format', field=field)
    return month
