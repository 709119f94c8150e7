"""
Payment reconciliation: join commitments with their payment row for a month.
"""

from typing import Iterable, List

from finsync.utils.money import format_money, quantize


def attach_payment_status(store, commitments: Iterable, month: str) -> List[dict]:
    """Annotate each commitment with whether it was paid in ``month``.

    Read-only. The commitment objects are wrapped, never modified. Each
    entry is ``{'commitment', 'is_paid', 'amount_paid'}`` where
    ``amount_paid`` is None for unpaid commitments; callers fall back to the
    nominal amount themselves.
    """
    commitments = list(commitments)
    payments = store.payments_for_month([c.id for c in commitments], month)

    reconciled = []
    for commitment in commitments:
        payment = payments.get(commitment.id)
        reconciled.append({
            'commitment': commitment,
            'is_paid': payment is not None,
            'amount_paid': quantize(payment.amount_paid) if payment is not None else None
        })
    return reconciled


def reconciled_to_dict(entry: dict) -> dict:
    """JSON shape of a reconciled commitment: the commitment plus isPaid/amountPaid."""
    data = entry['commitment'].to_dict()
    data['isPaid'] = entry['is_paid']
    data['amountPaid'] = format_money(entry['amount_paid'])
    return data
