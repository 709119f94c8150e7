"""
Commitment create / update / delete / import operations.
"""

from datetime import datetime
from typing import List, Optional
import logging

from finsync.models.commitment import Commitment, CommitmentType
from finsync.models.group import MemberStatus
from finsync.utils.audit_log import AuditLogger
from finsync.utils.errors import NotFoundError, ValidationError
from finsync.utils.money import to_money
from finsync.utils.months import validate_month
from finsync.utils.validation import parse_bool, parse_date, parse_int, require_fields

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('userId', 'type', 'title', 'category', 'amount', 'startDate')
IMPORT_REQUIRED_FIELDS = ('title', 'category', 'amount')

# JSON key -> model attribute for partial updates
UPDATABLE_FIELDS = {
    'type': 'type',
    'title': 'title',
    'category': 'category',
    'amount': 'amount',
    'recurring': 'recurring',
    'shared': 'shared',
    'groupId': 'group_id',
    'startDate': 'start_date',
}

DELETE_SCOPES = ('single', 'all')


def _parse_type(value, field: str = 'type') -> str:
    valid = [t.value for t in CommitmentType]
    if value not in valid:
        raise ValidationError(f"{field} must be one of: {', '.join(valid)}", field=field)
    return value


def _parse_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field} is required', field=field)
    return value.strip()


def _check_shared_group(store, owner_id: int, shared: bool, group_id: Optional[int]) -> Optional[int]:
    """Enforce: a shared commitment points at a group its owner has accepted.

    Returns the group id to store (None for non-shared commitments).
    """
    if not shared:
        return None
    if group_id is None:
        raise ValidationError('groupId is required for shared commitments', field='groupId')
    membership = store.get_membership(group_id, owner_id, status=MemberStatus.ACCEPTED.value)
    if membership is None:
        raise ValidationError('groupId must be a group the owner belongs to', field='groupId')
    return group_id


def get_commitment_or_404(store, commitment_id: int) -> Commitment:
    commitment = store.get_commitment(commitment_id)
    if commitment is None:
        raise NotFoundError('Commitment not found')
    return commitment


def list_commitments_for_user(store, user_id: int) -> List[Commitment]:
    return store.list_commitments_for_user(user_id)


def create_commitment(store, data: dict) -> Commitment:
    """Validate a create payload and persist the commitment."""
    require_fields(data, REQUIRED_FIELDS)

    user_id = parse_int(data['userId'], 'userId')
    if store.get_user(user_id) is None:
        raise NotFoundError('User not found')

    shared = parse_bool(data.get('shared'), 'shared', default=False)
    group_id = parse_int(data['groupId'], 'groupId') if data.get('groupId') is not None else None

    fields = {
        'user_id': user_id,
        'type': _parse_type(data['type']),
        'title': _parse_text(data['title'], 'title'),
        'category': _parse_text(data['category'], 'category'),
        'amount': to_money(data['amount']),
        'recurring': parse_bool(data.get('recurring'), 'recurring', default=False),
        'shared': shared,
        'group_id': _check_shared_group(store, user_id, shared, group_id),
        'start_date': parse_date(data['startDate'], 'startDate'),
        'is_imported': False,
    }

    commitment = store.add_commitment(**fields)
    store.commit()
    logger.info("Created commitment %s for user %s", commitment.id, user_id)
    return commitment


def update_commitment(store, commitment_id: int, changes: dict) -> Commitment:
    """Apply a partial update. Unknown keys are ignored."""
    if not isinstance(changes, dict):
        raise ValidationError('Request body must be a JSON object')

    commitment = get_commitment_or_404(store, commitment_id)

    parsed = {}
    for key, attr in UPDATABLE_FIELDS.items():
        if key not in changes:
            continue
        value = changes[key]
        if key == 'type':
            parsed[attr] = _parse_type(value)
        elif key in ('title', 'category'):
            parsed[attr] = _parse_text(value, key)
        elif key == 'amount':
            parsed[attr] = to_money(value)
        elif key in ('recurring', 'shared'):
            if value is None:
                raise ValidationError(f'{key} must be true or false', field=key)
            parsed[attr] = parse_bool(value, key)
        elif key == 'groupId':
            parsed[attr] = parse_int(value, key) if value is not None else None
        elif key == 'startDate':
            parsed[attr] = parse_date(value, key) if value is not None else None

    shared = parsed.get('shared', commitment.shared)
    if shared and commitment.is_imported:
        raise ValidationError('Imported commitments cannot be shared', field='shared')

    if 'shared' in parsed or 'group_id' in parsed:
        group_id = parsed.get('group_id', commitment.group_id)
        parsed['group_id'] = _check_shared_group(store, commitment.user_id, shared, group_id)

    store.update_commitment(commitment, parsed)
    store.commit()
    logger.info("Updated commitment %s fields=%s", commitment.id, sorted(parsed))
    return commitment


def delete_commitment(store, commitment_id: int, scope: Optional[str] = None,
                      month: Optional[str] = None) -> str:
    """Delete a commitment.

    scope='all' (the default) removes the commitment and every payment.
    scope='single' removes only the payment row for ``month``; the
    commitment keeps showing up in other months.

    Returns the scope that was applied.
    """
    scope = scope or 'all'
    if scope not in DELETE_SCOPES:
        raise ValidationError(f"scope must be one of: {', '.join(DELETE_SCOPES)}", field='scope')

    commitment = get_commitment_or_404(store, commitment_id)

    if scope == 'single':
        validate_month(month)
        store.delete_payment(commitment.id, month)
    else:
        store.delete_commitment(commitment)

    store.commit()
    AuditLogger.log_commitment_deleted(commitment_id, scope, month if scope == 'single' else None)
    return scope


def _parse_import_row(row, index: int) -> dict:
    """Validate one import row; field names in errors carry the row index."""
    prefix = f'commitments[{index}]'
    if not isinstance(row, dict):
        raise ValidationError(f'{prefix} must be an object', field=prefix)

    missing = [f for f in IMPORT_REQUIRED_FIELDS if row.get(f) is None or row.get(f) == '']
    if missing:
        raise ValidationError(
            f"{prefix} is missing required fields: {', '.join(missing)}",
            field=f'{prefix}.{missing[0]}'
        )

    start_date = row.get('startDate')
    return {
        'type': _parse_type(row.get('type') or CommitmentType.STATIC.value, f'{prefix}.type'),
        'title': _parse_text(row['title'], f'{prefix}.title'),
        'category': _parse_text(row['category'], f'{prefix}.category'),
        'amount': to_money(row['amount'], field=f'{prefix}.amount'),
        'recurring': parse_bool(row.get('recurring'), f'{prefix}.recurring', default=False),
        'start_date': parse_date(start_date, f'{prefix}.startDate') if start_date else datetime.utcnow().date(),
    }


def import_commitments(store, user_id, rows) -> List[Commitment]:
    """Bulk-create imported commitments, all or nothing.

    Every row is validated before anything is written, so a bad row fails
    the whole batch and nothing is imported. Imported commitments are
    always personal (shared=False, no group).
    """
    user_id = parse_int(user_id, 'userId')
    if not isinstance(rows, list):
        raise ValidationError('commitments must be an array', field='commitments')
    if store.get_user(user_id) is None:
        raise NotFoundError('User not found')

    parsed_rows = [_parse_import_row(row, index) for index, row in enumerate(rows)]

    imported_at = datetime.utcnow()
    created = []
    for fields in parsed_rows:
        created.append(store.add_commitment(
            user_id=user_id,
            shared=False,
            group_id=None,
            is_imported=True,
            imported_at=imported_at,
            **fields
        ))

    store.commit()
    AuditLogger.log_import(user_id, len(created))
    return created
