"""
User routes - sync from the identity provider, lookup.
"""

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from finsync import db
from finsync.services import users as user_service
from finsync.store import get_store
import logging

logger = logging.getLogger(__name__)

users_bp = Blueprint('users', __name__, url_prefix='/users')


@users_bp.route('/sync', methods=['POST'])
def sync_user():
    """Create the user on first sign-in, return the existing one afterwards."""
    data = request.get_json(silent=True)
    data = data if isinstance(data, dict) else {}
    try:
        user, created = user_service.sync_user(get_store(), data.get('email'))
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error syncing user {data.get('email')}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to sync user'}), 500

    return jsonify(user.to_dict()), 201 if created else 200


@users_bp.route('/<int:user_id>')
def get_user(user_id):
    """Fetch a single user."""
    try:
        user = user_service.get_user_or_404(get_store(), user_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error loading user {user_id}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to load user'}), 500

    return jsonify(user.to_dict())
