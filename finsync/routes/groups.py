"""
Group routes - create groups, invite/accept/remove members, shared commitments.
"""

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from finsync import db
from finsync.services import groups as group_service
from finsync.store import get_store
from finsync.utils.validation import require_fields
import logging

logger = logging.getLogger(__name__)

groups_bp = Blueprint('groups', __name__, url_prefix='/groups')


@groups_bp.route('', methods=['POST'])
def create_group():
    """Create a group owned by ownerId."""
    data = request.get_json(silent=True)
    data = data if data is not None else {}
    require_fields(data, ('name', 'ownerId'))

    try:
        group = group_service.create_group(get_store(), data['name'], data['ownerId'])
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error creating group for owner {data.get('ownerId')}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to create group'}), 500

    return jsonify(group.to_dict()), 201


@groups_bp.route('/user/<int:user_id>')
def user_groups(user_id):
    """Groups the user has joined."""
    try:
        groups = group_service.get_user_groups(get_store(), user_id)
        return jsonify([g.to_dict() for g in groups])
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error loading groups for user {user_id}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to load groups'}), 500


@groups_bp.route('/invitations/<int:user_id>')
def user_invitations(user_id):
    """Pending invitations for the user."""
    try:
        invitations = group_service.get_user_invitations(get_store(), user_id)
        results = []
        for invitation in invitations:
            data = invitation.to_dict()
            data['group'] = invitation.group.to_dict(include_members=False)
            results.append(data)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error loading invitations for user {user_id}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to load invitations'}), 500

    return jsonify(results)


@groups_bp.route('/<int:group_id>')
def group_detail(group_id):
    """Group with its members. Members only."""
    require_fields(request.args, ('userId',))
    try:
        group = group_service.get_group_detail(get_store(), group_id, request.args['userId'])
        return jsonify(group.to_dict())
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error loading group {group_id}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to load group'}), 500


@groups_bp.route('/<int:group_id>/commitments')
def group_commitments(group_id):
    """Shared commitments in the group, reconciled when month is given."""
    require_fields(request.args, ('userId',))
    try:
        commitments = group_service.get_group_commitments(
            get_store(), group_id, request.args['userId'], request.args.get('month')
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error loading commitments for group {group_id}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to load group commitments'}), 500

    return jsonify(commitments)


@groups_bp.route('/invite', methods=['POST'])
def invite_member():
    """Invite a user; invitedBy must already be an accepted member."""
    data = request.get_json(silent=True)
    data = data if data is not None else {}
    require_fields(data, ('groupId', 'userId', 'invitedBy'))

    try:
        member = group_service.invite_member(get_store(), data['groupId'], data['userId'], data['invitedBy'])
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error inviting user {data.get('userId')} to group {data.get('groupId')}: {str(e)}",
                     exc_info=True)
        return jsonify({'error': 'Failed to invite member'}), 500

    return jsonify(member.to_dict()), 201


@groups_bp.route('/accept', methods=['POST'])
def accept_invitation():
    """Accept a pending invitation."""
    data = request.get_json(silent=True)
    data = data if data is not None else {}
    require_fields(data, ('groupId', 'userId'))

    try:
        member = group_service.accept_invitation(get_store(), data['groupId'], data['userId'])
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error accepting invitation for user {data.get('userId')} group {data.get('groupId')}: "
                     f"{str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to accept invitation'}), 500

    return jsonify(member.to_dict())


@groups_bp.route('/<int:group_id>/members/<int:member_id>', methods=['DELETE'])
def remove_member(group_id, member_id):
    """Owner removes a membership row."""
    data = request.get_json(silent=True)
    data = data if isinstance(data, dict) else {}
    requester_id = request.args.get('requesterId') or data.get('requesterId')
    require_fields({'requesterId': requester_id}, ('requesterId',))

    try:
        group_service.remove_member(get_store(), group_id, member_id, requester_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error removing member {member_id} from group {group_id}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to remove member'}), 500

    return jsonify({'success': True, 'message': 'Member removed'})
