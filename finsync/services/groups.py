"""
Group sharing rules.

Membership lifecycle per (group, user):

    invited  -> accepted   (invitee accepts; one way)
    invited  -> removed    (owner deletes the row)
    accepted -> removed    (owner deletes the row)

There is no declined state. Only accepted members count as being in the
group. "Owner" always means ``group.owner_id``; the membership ``role``
column is informational and is not used for authorization.
"""

from typing import List, Optional
import logging

from finsync.models.group import Group, GroupMember, MemberRole, MemberStatus
from finsync.services.reconciliation import attach_payment_status, reconciled_to_dict
from finsync.utils.audit_log import AuditLogger
from finsync.utils.errors import (
    AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from finsync.utils.months import validate_month
from finsync.utils.validation import parse_int

logger = logging.getLogger(__name__)


def _require_accepted_member(store, group_id: int, user_id: int, action: str) -> GroupMember:
    """Return the caller's accepted membership or raise.

    The same error is raised whether the group is missing or the caller
    is simply not in it.
    """
    membership = store.get_membership(group_id, user_id, status=MemberStatus.ACCEPTED.value)
    if membership is None:
        AuditLogger.log_denied(action, {'group_id': group_id, 'user_id': user_id})
        raise AuthorizationError('You are not a member of this group')
    return membership


def create_group(store, name, owner_id) -> Group:
    """Create a group; the owner is inserted as an accepted owner member."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError('name is required', field='name')
    owner_id = parse_int(owner_id, 'ownerId')
    if store.get_user(owner_id) is None:
        raise NotFoundError('User not found')

    group = store.create_group(name.strip(), owner_id)
    store.commit()
    AuditLogger.log_group_created(group.id, owner_id)
    return group


def invite_member(store, group_id, user_id, invited_by) -> GroupMember:
    """Invite ``user_id`` to the group on behalf of an accepted member."""
    group_id = parse_int(group_id, 'groupId')
    user_id = parse_int(user_id, 'userId')
    invited_by = parse_int(invited_by, 'invitedBy')

    _require_accepted_member(store, group_id, invited_by, 'INVITE')

    if store.get_user(user_id) is None:
        raise NotFoundError('User not found')

    if store.get_membership(group_id, user_id) is not None:
        raise ConflictError('User is already a member or has been invited')

    member = store.add_member(group_id, user_id, MemberRole.MEMBER.value, MemberStatus.INVITED.value)
    store.commit()
    AuditLogger.log_member_invited(group_id, user_id, invited_by)
    return member


def accept_invitation(store, group_id, user_id) -> GroupMember:
    """Move an invited membership to accepted. Fails if there is no invitation."""
    group_id = parse_int(group_id, 'groupId')
    user_id = parse_int(user_id, 'userId')

    member = store.get_membership(group_id, user_id, status=MemberStatus.INVITED.value)
    if member is None:
        raise NotFoundError('Invitation not found')

    store.set_member_status(member, MemberStatus.ACCEPTED.value)
    store.commit()
    AuditLogger.log_invitation_accepted(group_id, user_id)
    return member


def remove_member(store, group_id, member_id, requester_id) -> None:
    """Delete a membership row. Only the group owner may do this.

    Commitments the removed user shared into the group go back to being
    personal, so they stay on that user's dashboard and leave the group's.
    """
    group_id = parse_int(group_id, 'groupId')
    member_id = parse_int(member_id, 'memberId')
    requester_id = parse_int(requester_id, 'requesterId')

    group = store.get_group(group_id)
    if group is None or group.owner_id != requester_id:
        AuditLogger.log_denied('REMOVE_MEMBER', {'group_id': group_id, 'requester_id': requester_id})
        raise AuthorizationError('Only the group owner can remove members')

    member = store.get_member(member_id)
    if member is None or member.group_id != group_id:
        raise NotFoundError('Member not found')

    if member.user_id == group.owner_id:
        raise ValidationError('The group owner cannot be removed from the group', field='memberId')

    unshared = store.unshare_member_commitments(group_id, member.user_id)
    store.delete_member(member)
    store.commit()
    AuditLogger.log_member_removed(group_id, member_id, requester_id, len(unshared))


def get_user_groups(store, user_id: int) -> List[Group]:
    """Groups in which the user has an accepted membership."""
    return store.groups_for_user(user_id)


def get_user_invitations(store, user_id: int) -> List[GroupMember]:
    """Pending invitations addressed to the user."""
    return store.invitations_for_user(user_id)


def get_group_detail(store, group_id, user_id) -> Group:
    group_id = parse_int(group_id, 'groupId')
    user_id = parse_int(user_id, 'userId')
    _require_accepted_member(store, group_id, user_id, 'VIEW_GROUP')
    return store.get_group(group_id)


def get_group_commitments(store, group_id, user_id, month: Optional[str] = None) -> List[dict]:
    """Shared commitments of a group, as JSON-ready dicts.

    With ``month`` each commitment carries isPaid/amountPaid for that
    month. Without it, each commitment carries its raw payment rows.
    """
    group_id = parse_int(group_id, 'groupId')
    user_id = parse_int(user_id, 'userId')
    if month is not None:
        validate_month(month)

    _require_accepted_member(store, group_id, user_id, 'VIEW_GROUP_COMMITMENTS')
    commitments = store.group_commitments(group_id)

    if month is not None:
        return [reconciled_to_dict(entry) for entry in attach_payment_status(store, commitments, month)]

    results = []
    for commitment in commitments:
        data = commitment.to_dict()
        data['payments'] = [p.to_dict() for p in sorted(commitment.payments, key=lambda p: p.month)]
        results.append(data)
    return results
