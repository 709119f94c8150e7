"""
Audit logging for membership changes and destructive operations.
"""

import json
import logging

logger = logging.getLogger('finsync.audit')


class AuditLogger:
    """Writes one structured line per auditable event."""

    @staticmethod
    def log_event(event_type: str, details: dict = None, level: int = logging.INFO) -> None:
        logger.log(level, '%s %s', event_type, json.dumps(details or {}, default=str, sort_keys=True))

    @staticmethod
    def log_denied(action: str, details: dict) -> None:
        AuditLogger.log_event(f'DENIED_{action}', details, level=logging.WARNING)

    @staticmethod
    def log_group_created(group_id: int, owner_id: int) -> None:
        AuditLogger.log_event('GROUP_CREATED', {'group_id': group_id, 'owner_id': owner_id})

    @staticmethod
    def log_member_invited(group_id: int, user_id: int, invited_by: int) -> None:
        AuditLogger.log_event('MEMBER_INVITED', {
            'group_id': group_id,
            'user_id': user_id,
            'invited_by': invited_by
        })

    @staticmethod
    def log_invitation_accepted(group_id: int, user_id: int) -> None:
        AuditLogger.log_event('INVITATION_ACCEPTED', {'group_id': group_id, 'user_id': user_id})

    @staticmethod
    def log_member_removed(group_id: int, member_id: int, requester_id: int, unshared: int = 0) -> None:
        AuditLogger.log_event('MEMBER_REMOVED', {
            'group_id': group_id,
            'member_id': member_id,
            'requester_id': requester_id,
            'unshared_commitments': unshared
        })

    @staticmethod
    def log_commitment_deleted(commitment_id: int, scope: str, month: str = None) -> None:
        AuditLogger.log_event('COMMITMENT_DELETED', {
            'commitment_id': commitment_id,
            'scope': scope,
            'month': month
        })

    @staticmethod
    def log_import(user_id: int, count: int) -> None:
        AuditLogger.log_event('COMMITMENTS_IMPORTED', {'user_id': user_id, 'count': count})
