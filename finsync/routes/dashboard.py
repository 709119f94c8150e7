"""
Dashboard route - monthly balance summary.
"""

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from finsync import db
from finsync.services.dashboard import get_dashboard_summary, summary_to_dict
from finsync.store import get_store
from finsync.utils.validation import visibility_filters_from_args
import logging

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/dashboard')


@dashboard_bp.route('/<int:user_id>', defaults={'month': None})
@dashboard_bp.route('/<int:user_id>/<month>')
def dashboard(user_id, month):
    """Summary for a month; defaults to the current month."""
    filters = visibility_filters_from_args(request.args)
    try:
        summary = get_dashboard_summary(get_store(), user_id, month, filters)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error building dashboard for user {user_id} month {month}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to load dashboard'}), 500

    return jsonify(summary_to_dict(summary))
