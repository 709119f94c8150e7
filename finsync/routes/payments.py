"""
Payment routes - mark commitments paid/unpaid per month.
"""

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from finsync import db
from finsync.services import payments as payment_service
from finsync.store import get_store
from finsync.utils.validation import require_fields
import logging

logger = logging.getLogger(__name__)

payments_bp = Blueprint('payments', __name__)


@payments_bp.route('/commitments/<int:commitment_id>/pay', methods=['POST'])
def mark_paid(commitment_id):
    """Record the payment for a month, overwriting any earlier one."""
    data = request.get_json(silent=True)
    data = data if data is not None else {}
    require_fields(data, ('userId', 'month', 'amount'))

    try:
        payment = payment_service.mark_commitment_paid(
            get_store(), commitment_id, data['userId'], data['month'], data['amount']
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error marking commitment {commitment_id} paid for {data.get('month')}: {str(e)}",
                     exc_info=True)
        return jsonify({'error': 'Failed to mark commitment as paid'}), 500

    return jsonify(payment.to_dict())


@payments_bp.route('/commitments/<int:commitment_id>/pay/<month>', methods=['DELETE'])
def mark_unpaid(commitment_id, month):
    """Remove the month's payment; the commitment stays."""
    try:
        payment_service.mark_commitment_unpaid(get_store(), commitment_id, month)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error marking commitment {commitment_id} unpaid for {month}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to mark commitment as unpaid'}), 500

    return jsonify({'success': True, 'message': 'Commitment marked as unpaid'})


@payments_bp.route('/payments/user/<int:user_id>/month/<month>')
def user_payments(user_id, month):
    """Payments a user recorded in a month."""
    try:
        payments = payment_service.get_payments_by_user(get_store(), user_id, month)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error loading payments for user {user_id} month {month}: {str(e)}", exc_info=True)
        return jsonify({'error': 'Failed to load payments'}), 500

    return jsonify([p.to_dict() for p in payments])
