"""
Dashboard aggregation.

Combines the month's income with the reconciled commitment list into the
summary totals the dashboard shows. All arithmetic is done in Decimal so
the identities

    remaining_commitments == total_commitments - paid_commitments
    available_balance     == income - paid_commitments

hold exactly.
"""

from decimal import Decimal
from typing import List, Optional
import logging

from finsync.services.reconciliation import attach_payment_status, reconciled_to_dict
from finsync.services.visibility import select_candidate_commitments
from finsync.utils.money import ZERO, format_money, quantize
from finsync.utils.months import current_month, validate_month

logger = logging.getLogger(__name__)


def get_commitments_for_month(store, user_id: int, month: str, filters: Optional[dict] = None) -> List[dict]:
    """Visible commitments for ``user_id`` annotated with their ``month`` payment status."""
    validate_month(month)
    candidates = select_candidate_commitments(store, user_id, filters)
    return attach_payment_status(store, candidates, month)


def summarize(month: str, income: Decimal, reconciled: List[dict]) -> dict:
    """Compute the dashboard totals from income and a reconciled list."""
    income = quantize(income)
    total_commitments = ZERO
    paid_commitments = ZERO
    unpaid_count = 0

    for entry in reconciled:
        nominal = quantize(entry['commitment'].amount)
        total_commitments += nominal
        if entry['is_paid']:
            # Dynamic commitments may be paid at a different amount than estimated
            paid = entry['amount_paid'] if entry['amount_paid'] is not None else nominal
            paid_commitments += paid
        else:
            unpaid_count += 1

    return {
        'month': month,
        'income': income,
        'total_commitments': total_commitments,
        'paid_commitments': paid_commitments,
        'remaining_commitments': total_commitments - paid_commitments,
        'available_balance': income - paid_commitments,
        'commitments': len(reconciled),
        'unpaid_count': unpaid_count,
        'commitments_list': reconciled
    }


def get_dashboard_summary(store, user_id: int, month: Optional[str] = None,
                          filters: Optional[dict] = None) -> dict:
    """Build the dashboard summary for ``user_id`` and ``month``.

    A missing month means the current calendar month at call time. A
    missing income row counts as zero income.
    """
    month = validate_month(month) if month is not None else current_month()

    income_row = store.get_monthly_income(user_id, month)
    income = income_row.amount if income_row else ZERO

    reconciled = get_commitments_for_month(store, user_id, month, filters)
    summary = summarize(month, income, reconciled)

    logger.debug(
        "Dashboard for user %s month %s: %s commitments, %s unpaid",
        user_id, month, summary['commitments'], summary['unpaid_count']
    )
    return summary


def summary_to_dict(summary: dict) -> dict:
    """JSON shape of a dashboard summary."""
    return {
        'month': summary['month'],
        'income': format_money(summary['income']),
        'totalCommitments': format_money(summary['total_commitments']),
        'paidCommitments': format_money(summary['paid_commitments']),
        'remainingCommitments': format_money(summary['remaining_commitments']),
        'availableBalance': format_money(summary['available_balance']),
        'commitments': summary['commitments'],
        'unpaidCount': summary['unpaid_count'],
        'commitmentsList': [reconciled_to_dict(entry) for entry in summary['commitments_list']]
    }
