"""
Monthly income routes.
"""

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from finsync import db
from finsync.services import income as income_service
from finsync.store import get_store
from finsync.utils.validation import require_fields
import logging

logger = logging.getLogger(__name__)

income_bp = Blueprint('income', __name__, url_prefix='/monthly-income')


@income_bp.route('/<int:user_id>/<month>')
def get_monthly_income(user_id, month):
    """Income for one month. 404 means no income was set, which callers treat as 0."""
    try:
        income = income_service.get_monthly_income(get_store(), user_id, month)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error loading income for user {user_id} month {month}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to load monthly income'}), 500

    if not income:
        return jsonify({'error': 'Monthly income not found'}), 404
    return jsonify(income.to_dict())


@income_bp.route('', methods=['POST'])
def set_monthly_income():
    """Create or overwrite the income for (userId, month)."""
    data = request.get_json(silent=True)
    data = data if data is not None else {}
    require_fields(data, ('userId', 'month', 'amount'))

    try:
        income = income_service.set_monthly_income(get_store(), data['userId'], data['month'], data['amount'])
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error setting income for user {data.get('userId')} month {data.get('month')}: {str(e)}",
                     exc_info=True)
        return jsonify({'error': 'Failed to set monthly income'}), 500

    return jsonify(income.to_dict())


@income_bp.route('/<int:user_id>/<month>', methods=['PUT'])
def update_monthly_income(user_id, month):
    """Same upsert as POST, keyed from the URL."""
    data = request.get_json(silent=True)
    data = data if data is not None else {}
    require_fields(data, ('amount',))

    try:
        income = income_service.set_monthly_income(get_store(), user_id, month, data['amount'])
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error updating income for user {user_id} month {month}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to update monthly income'}), 500

    return jsonify(income.to_dict())
