"""
Monthly income lookups and upserts.
"""

from typing import Optional
import logging

from finsync.models.monthly_income import MonthlyIncome
from finsync.utils.errors import NotFoundError
from finsync.utils.money import to_money
from finsync.utils.months import validate_month
from finsync.utils.validation import parse_int

logger = logging.getLogger(__name__)


def get_monthly_income(store, user_id: int, month: str) -> Optional[MonthlyIncome]:
    validate_month(month)
    return store.get_monthly_income(user_id, month)


def set_monthly_income(store, user_id, month: str, amount) -> MonthlyIncome:
    """Upsert income for (user, month) and refresh the user's income snapshot."""
    user_id = parse_int(user_id, 'userId')
    validate_month(month)
    amount = to_money(amount)

    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError('User not found')

    income = store.upsert_monthly_income(user_id, month, amount)
    store.set_user_income_snapshot(user, amount)
    store.commit()
    logger.info("Set income for user %s month %s", user_id, month)
    return income
