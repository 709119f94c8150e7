"""
Request payload validation helpers.
"""

from datetime import date, datetime
from typing import Iterable, Optional

from dateutil import parser as date_parser

from finsync.utils.errors import ValidationError

_TRUE_STRINGS = {'true', '1', 'yes', 'on'}
_FALSE_STRINGS = {'false', '0', 'no', 'off'}


def require_fields(data: dict, fields: Iterable[str]) -> None:
    """Raise if any of ``fields`` is absent or empty in ``data``."""
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    missing = [f for f in fields if data.get(f) is None or data.get(f) == '']
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", field=missing[0])


def parse_int(value, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer', field=field)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be an integer', field=field)


def parse_bool(value, field: str, default: Optional[bool] = None) -> Optional[bool]:
    """Accept JSON booleans and the usual string spellings."""
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValidationError(f'{field} must be true or false', field=field)


def parse_date(value, field: str) -> date:
    """Parse an ISO-8601 date or datetime string into a ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field} must be an ISO date', field=field)
    try:
        return date_parser.isoparse(value.strip()).date()
    except ValueError:
        raise ValidationError(f'{field} must be an ISO date', field=field)


def visibility_filters_from_args(args) -> dict:
    """Read includePersonal/includeShared/includeImported query flags.

    Flags that were not sent are left out so the filter applies its own
    defaults.
    """
    filters = {}
    for arg_name, key in (('includePersonal', 'include_personal'),
                          ('includeShared', 'include_shared'),
                          ('includeImported', 'include_imported')):
        value = parse_bool(args.get(arg_name), arg_name)
        if value is not None:
            filters[key] = value
    return filters
