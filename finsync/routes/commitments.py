"""
Commitment routes - list, month view, create, edit, delete, import.
"""

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from finsync import db
from finsync.services import commitments as commitment_service
from finsync.services.dashboard import get_commitments_for_month
from finsync.services.reconciliation import reconciled_to_dict
from finsync.store import get_store
from finsync.utils.validation import require_fields, visibility_filters_from_args
import logging

logger = logging.getLogger(__name__)

commitments_bp = Blueprint('commitments', __name__, url_prefix='/commitments')


@commitments_bp.route('/user/<int:user_id>')
def list_user_commitments(user_id):
    """Every commitment the user owns, newest first."""
    try:
        commitments = commitment_service.list_commitments_for_user(get_store(), user_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error listing commitments for user {user_id}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to load commitments'}), 500

    return jsonify([c.to_dict() for c in commitments])


@commitments_bp.route('/user/<int:user_id>/month/<month>')
def commitments_for_month(user_id, month):
    """Visible commitments for a month with paid status."""
    filters = visibility_filters_from_args(request.args)
    try:
        reconciled = get_commitments_for_month(get_store(), user_id, month, filters)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error loading commitments for user {user_id} month {month}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to load commitments'}), 500

    return jsonify([reconciled_to_dict(entry) for entry in reconciled])


@commitments_bp.route('', methods=['POST'])
def create_commitment():
    """Create a new commitment."""
    data = request.get_json(silent=True)
    data = data if data is not None else {}

    try:
        commitment = commitment_service.create_commitment(get_store(), data)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error creating commitment for user {data.get('userId')}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to create commitment'}), 500

    return jsonify(commitment.to_dict()), 201


@commitments_bp.route('/<int:commitment_id>', methods=['PUT'])
def update_commitment(commitment_id):
    """Partially update a commitment."""
    data = request.get_json(silent=True)
    data = data if data is not None else {}

    try:
        commitment = commitment_service.update_commitment(get_store(), commitment_id, data)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error updating commitment {commitment_id}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to update commitment'}), 500

    return jsonify(commitment.to_dict())


@commitments_bp.route('/<int:commitment_id>', methods=['DELETE'])
def delete_commitment(commitment_id):
    """Delete permanently (scope=all) or just one month's payment (scope=single)."""
    scope = request.args.get('scope')
    month = request.args.get('month')

    try:
        applied = commitment_service.delete_commitment(get_store(), commitment_id, scope, month)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error deleting commitment {commitment_id} scope={scope} month={month}: {str(e)}",
                     exc_info=True)
        return jsonify({'error': 'Failed to delete commitment'}), 500

    if applied == 'single':
        return jsonify({'success': True, 'message': 'Commitment deleted for this month'})
    return jsonify({'success': True, 'message': 'Commitment deleted permanently'})


@commitments_bp.route('/import', methods=['POST'])
def import_commitments():
    """Bulk import. Either every row is imported or none is."""
    data = request.get_json(silent=True)
    data = data if data is not None else {}
    require_fields(data, ('userId', 'commitments'))

    try:
        imported = commitment_service.import_commitments(get_store(), data['userId'], data['commitments'])
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error importing commitments for user {data.get('userId')}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to import commitments', 'imported': 0}), 500

    return jsonify({
        'success': True,
        'count': len(imported),
        'commitments': [c.to_dict() for c in imported]
    }), 201
