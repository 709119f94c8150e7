"""
Mark commitments paid or unpaid for a month.
"""

from typing import List
import logging

from finsync.models.commitment_payment import CommitmentPayment
from finsync.models.group import MemberStatus
from finsync.services.commitments import get_commitment_or_404
from finsync.utils.audit_log import AuditLogger
from finsync.utils.errors import AuthorizationError
from finsync.utils.money import to_money
from finsync.utils.months import validate_month
from finsync.utils.validation import parse_int

logger = logging.getLogger(__name__)


def _can_pay(store, commitment, user_id: int) -> bool:
    """Owner can always pay; accepted group members can pay shared ones."""
    if commitment.user_id == user_id:
        return True
    if commitment.shared and commitment.group_id is not None:
        membership = store.get_membership(commitment.group_id, user_id, status=MemberStatus.ACCEPTED.value)
        return membership is not None
    return False


def mark_commitment_paid(store, commitment_id: int, user_id, month: str, amount) -> CommitmentPayment:
    """Record (or overwrite) the payment for (commitment, month).

    Calling this twice for the same month leaves one row carrying the
    second call's amount and payer.
    """
    user_id = parse_int(user_id, 'userId')
    validate_month(month)
    amount = to_money(amount)

    commitment = get_commitment_or_404(store, commitment_id)
    if not _can_pay(store, commitment, user_id):
        AuditLogger.log_denied('PAYMENT', {'commitment_id': commitment_id, 'user_id': user_id})
        raise AuthorizationError()

    payment = store.upsert_payment(commitment.id, month, user_id, amount)
    store.commit()
    logger.info("Commitment %s marked paid for %s by user %s", commitment.id, month, user_id)
    return payment


def mark_commitment_unpaid(store, commitment_id: int, month: str) -> bool:
    """Delete the payment for (commitment, month). Returns whether a row existed."""
    validate_month(month)
    commitment = get_commitment_or_404(store, commitment_id)

    removed = store.delete_payment(commitment.id, month)
    store.commit()
    if removed:
        logger.info("Commitment %s marked unpaid for %s", commitment.id, month)
    return removed


def get_payments_by_user(store, user_id: int, month: str) -> List[CommitmentPayment]:
    validate_month(month)
    return store.payments_by_user(user_id, month)
