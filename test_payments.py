"""
Tests for marking commitments paid and unpaid.
"""

from decimal import Decimal

import pytest

from finsync.models.commitment_payment import CommitmentPayment
from finsync.services.groups import accept_invitation, create_group, invite_member
from finsync.services.payments import (
    get_payments_by_user, mark_commitment_paid, mark_commitment_unpaid
)
from finsync.services.reconciliation import attach_payment_status
from finsync.utils.errors import AuthorizationError, NotFoundError, ValidationError


def _payment_rows(commitment_id):
    return CommitmentPayment.query.filter_by(commitment_id=commitment_id).all()


def test_pay_is_idempotent_last_amount_wins(store, alice, make_commitment):
    power = make_commitment(alice, 'Power', '100', type='dynamic')

    mark_commitment_paid(store, power.id, alice.id, '2025-03', '95.00')
    mark_commitment_paid(store, power.id, alice.id, '2025-03', '102.40')

    rows = _payment_rows(power.id)
    assert len(rows) == 1
    assert rows[0].amount_paid == Decimal('102.40')
    assert rows[0].paid_by == alice.id


def test_payments_for_different_months_are_separate(store, alice, make_commitment):
    rent = make_commitment(alice, 'Rent', '1200')

    mark_commitment_paid(store, rent.id, alice.id, '2025-03', '1200')
    mark_commitment_paid(store, rent.id, alice.id, '2025-04', '1200')

    assert sorted(p.month for p in _payment_rows(rent.id)) == ['2025-03', '2025-04']


def test_unpay_reverts_to_unpaid(store, alice, make_commitment):
    rent = make_commitment(alice, 'Rent', '1200')
    mark_commitment_paid(store, rent.id, alice.id, '2025-03', '1200')

    assert mark_commitment_unpaid(store, rent.id, '2025-03') is True

    [entry] = attach_payment_status(store, [rent], '2025-03')
    assert entry['is_paid'] is False
    assert store.get_commitment(rent.id) is not None


def test_unpay_without_payment_is_a_no_op(store, alice, make_commitment):
    rent = make_commitment(alice, 'Rent', '1200')

    assert mark_commitment_unpaid(store, rent.id, '2025-03') is False


def test_unpay_missing_commitment(store):
    with pytest.raises(NotFoundError):
        mark_commitment_unpaid(store, 999, '2025-03')


def test_pay_missing_commitment(store, alice):
    with pytest.raises(NotFoundError):
        mark_commitment_paid(store, 999, alice.id, '2025-03', '10')


def test_pay_validates_month_and_amount(store, alice, make_commitment):
    rent = make_commitment(alice, 'Rent', '1200')

    with pytest.raises(ValidationError) as exc_info:
        mark_commitment_paid(store, rent.id, alice.id, '03-2025', '10')
    assert exc_info.value.field == 'month'

    with pytest.raises(ValidationError) as exc_info:
        mark_commitment_paid(store, rent.id, alice.id, '2025-03', '-5')
    assert exc_info.value.field == 'amount'

    assert _payment_rows(rent.id) == []


def test_stranger_cannot_pay_personal_commitment(store, alice, bob, make_commitment):
    rent = make_commitment(alice, 'Rent', '1200')

    with pytest.raises(AuthorizationError):
        mark_commitment_paid(store, rent.id, bob.id, '2025-03', '1200')

    assert _payment_rows(rent.id) == []


def test_accepted_member_can_pay_shared_commitment(store, alice, bob, make_commitment):
    group = create_group(store, 'Flat', alice.id)
    invite_member(store, group.id, bob.id, alice.id)
    internet = make_commitment(alice, 'Internet', '60', shared=True, groupId=group.id)

    # Invited is not enough
    with pytest.raises(AuthorizationError):
        mark_commitment_paid(store, internet.id, bob.id, '2025-03', '60')

    accept_invitation(store, group.id, bob.id)
    payment = mark_commitment_paid(store, internet.id, bob.id, '2025-03', '60')

    assert payment.paid_by == bob.id
    assert [p.commitment_id for p in get_payments_by_user(store, bob.id, '2025-03')] == [internet.id]
    assert get_payments_by_user(store, alice.id, '2025-03') == []


def test_pay_and_unpay_over_http(client, alice, make_commitment):
    rent = make_commitment(alice, 'Rent', '1200')

    response = client.post(f'/commitments/{rent.id}/pay',
                           json={'userId': alice.id, 'month': '2025-03', 'amount': '1200'})
    assert response.status_code == 200
    body = response.get_json()
    assert body['commitmentId'] == rent.id
    assert body['month'] == '2025-03'
    assert body['amountPaid'] == '1200.00'
    assert body['paidBy'] == alice.id

    listing = client.get(f'/payments/user/{alice.id}/month/2025-03').get_json()
    assert [p['commitmentId'] for p in listing] == [rent.id]

    response = client.delete(f'/commitments/{rent.id}/pay/2025-03')
    assert response.status_code == 200
    assert response.get_json()['success'] is True

    # Second unpay still succeeds
    assert client.delete(f'/commitments/{rent.id}/pay/2025-03').status_code == 200
    assert client.get(f'/payments/user/{alice.id}/month/2025-03').get_json() == []


def test_pay_http_errors(client, alice, bob, make_commitment):
    rent = make_commitment(alice, 'Rent', '1200')

    missing = client.post(f'/commitments/{rent.id}/pay', json={'userId': alice.id, 'month': '2025-03'})
    assert missing.status_code == 400
    assert missing.get_json()['field'] == 'amount'

    forbidden = client.post(f'/commitments/{rent.id}/pay',
                            json={'userId': bob.id, 'month': '2025-03', 'amount': '1'})
    assert forbidden.status_code == 403

    not_found = client.delete('/commitments/999/pay/2025-03')
    assert not_found.status_code == 404


def test_pay_updates_row_written_by_a_concurrent_request(store, alice, monkeypatch, make_commitment):
    power = make_commitment(alice, 'Power', '100', type='dynamic')
    mark_commitment_paid(store, power.id, alice.id, '2025-03', '95.00')

    # The first lookup misses the row, as a request racing the earlier one would
    real_get_payment = store.get_payment
    lookups = []

    def stale_get_payment(commitment_id, month):
        lookups.append(month)
        if len(lookups) == 1:
            return None
        return real_get_payment(commitment_id, month)

    monkeypatch.setattr(store, 'get_payment', stale_get_payment)

    payment = mark_commitment_paid(store, power.id, alice.id, '2025-03', '102.40')

    assert len(lookups) == 2
    rows = _payment_rows(power.id)
    assert len(rows) == 1
    assert rows[0].id == payment.id
    assert rows[0].amount_paid == Decimal('102.40')
