"""
Record store: the single persistence interface for FinSync.

All reads and writes against the database go through ``RecordStore``.
One instance is built in ``create_app`` around the Flask-SQLAlchemy scoped
session and handed to service functions as their first argument.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError

from finsync.models.user import User
from finsync.models.monthly_income import MonthlyIncome
from finsync.models.commitment import Commitment
from finsync.models.commitment_payment import CommitmentPayment
from finsync.models.group import Group, GroupMember, MemberRole, MemberStatus

logger = logging.getLogger(__name__)


def get_store() -> 'RecordStore':
    """Return the store registered on the running application."""
    return current_app.extensions['record_store']


class RecordStore:
    """CRUD access for users, income, commitments, payments and groups."""

    def __init__(self, session):
        self.session = session

    # -- transaction control --------------------------------------------

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def flush(self) -> None:
        self.session.flush()

    def _insert_unique(self, row, find_existing):
        """Insert ``row`` inside a savepoint.

        If another writer got there first and the unique key is taken, the
        savepoint is rolled back and the existing row is returned instead.
        """
        try:
            with self.session.begin_nested():
                self.session.add(row)
            return row
        except IntegrityError:
            existing = find_existing()
            if existing is None:
                raise
            logger.info("Unique key already taken for %r; updating existing row", row)
            return existing

    # -- users ----------------------------------------------------------

    def get_user(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.session.query(User).filter_by(email=email).first()

    def create_user(self, email: str) -> User:
        user = User(email=email)
        self.session.add(user)
        return user

    def set_user_income_snapshot(self, user: User, amount: Decimal) -> None:
        user.monthly_income = amount
        user.updated_at = datetime.utcnow()

    # -- monthly income -------------------------------------------------

    def get_monthly_income(self, user_id: int, month: str) -> Optional[MonthlyIncome]:
        return self.session.query(MonthlyIncome).filter_by(user_id=user_id, month=month).first()

    def upsert_monthly_income(self, user_id: int, month: str, amount: Decimal) -> MonthlyIncome:
        """Insert or overwrite the income row for (user, month). Last write wins."""
        income = self.get_monthly_income(user_id, month)
        if income is None:
            income = self._insert_unique(
                MonthlyIncome(user_id=user_id, month=month, amount=amount),
                lambda: self.get_monthly_income(user_id, month)
            )
        income.amount = amount
        income.updated_at = datetime.utcnow()
        return income

    # -- commitments ----------------------------------------------------

    def get_commitment(self, commitment_id: int) -> Optional[Commitment]:
        return self.session.get(Commitment, commitment_id)

    def list_commitments_for_user(self, user_id: int) -> List[Commitment]:
        return self.session.query(Commitment).filter_by(user_id=user_id).order_by(
            Commitment.created_at.desc(), Commitment.id.desc()
        ).all()

    def personal_commitments(self, user_id: int) -> List[Commitment]:
        return self.session.query(Commitment).filter(
            Commitment.user_id == user_id,
            Commitment.shared.is_(False),
            Commitment.is_imported.is_(False)
        ).all()

    def imported_commitments(self, user_id: int) -> List[Commitment]:
        return self.session.query(Commitment).filter(
            Commitment.user_id == user_id,
            Commitment.is_imported.is_(True)
        ).all()

    def shared_commitments(self, group_ids: Iterable[int]) -> List[Commitment]:
        group_ids = list(group_ids)
        if not group_ids:
            return []
        return self.session.query(Commitment).filter(
            Commitment.shared.is_(True),
            Commitment.group_id.in_(group_ids)
        ).all()

    def group_commitments(self, group_id: int) -> List[Commitment]:
        return self.session.query(Commitment).filter(
            Commitment.shared.is_(True),
            Commitment.group_id == group_id
        ).order_by(Commitment.created_at.desc(), Commitment.id.desc()).all()

    def add_commitment(self, **fields) -> Commitment:
        commitment = Commitment(**fields)
        self.session.add(commitment)
        return commitment

    def update_commitment(self, commitment: Commitment, changes: dict) -> Commitment:
        for name, value in changes.items():
            setattr(commitment, name, value)
        commitment.updated_at = datetime.utcnow()
        return commitment

    def delete_commitment(self, commitment: Commitment) -> None:
        """Delete the commitment; its payment history goes with it."""
        self.session.delete(commitment)

    # -- payments -------------------------------------------------------

    def get_payment(self, commitment_id: int, month: str) -> Optional[CommitmentPayment]:
        return self.session.query(CommitmentPayment).filter_by(
            commitment_id=commitment_id, month=month
        ).first()

    def payments_for_month(self, commitment_ids: Iterable[int], month: str) -> Dict[int, CommitmentPayment]:
        """Map commitment id -> payment row for ``month``, one query for the lot."""
        commitment_ids = list(commitment_ids)
        if not commitment_ids:
            return {}
        rows = self.session.query(CommitmentPayment).filter(
            CommitmentPayment.commitment_id.in_(commitment_ids),
            CommitmentPayment.month == month
        ).all()
        return {row.commitment_id: row for row in rows}

    def payments_by_user(self, user_id: int, month: str) -> List[CommitmentPayment]:
        return self.session.query(CommitmentPayment).filter_by(paid_by=user_id, month=month).order_by(
            CommitmentPayment.id
        ).all()

    def upsert_payment(self, commitment_id: int, month: str, paid_by: int, amount: Decimal) -> CommitmentPayment:
        """Create the (commitment, month) payment or overwrite the existing one."""
        payment = self.get_payment(commitment_id, month)
        if payment is None:
            payment = self._insert_unique(
                CommitmentPayment(commitment_id=commitment_id, month=month, paid_by=paid_by, amount_paid=amount),
                lambda: self.get_payment(commitment_id, month)
            )
        payment.paid_by = paid_by
        payment.amount_paid = amount
        payment.paid_at = datetime.utcnow()
        return payment

    def delete_payment(self, commitment_id: int, month: str) -> bool:
        """Remove the (commitment, month) payment. Returns False if there was none."""
        payment = self.get_payment(commitment_id, month)
        if not payment:
            return False
        self.session.delete(payment)
        return True

    # -- groups ---------------------------------------------------------

    def get_group(self, group_id: int) -> Optional[Group]:
        return self.session.get(Group, group_id)

    def create_group(self, name: str, owner_id: int) -> Group:
        """Create a group with its owner already an accepted member."""
        group = Group(name=name, owner_id=owner_id)
        group.members.append(GroupMember(
            user_id=owner_id,
            role=MemberRole.OWNER.value,
            status=MemberStatus.ACCEPTED.value
        ))
        self.session.add(group)
        return group

    def get_membership(self, group_id: int, user_id: int, status: Optional[str] = None) -> Optional[GroupMember]:
        query = self.session.query(GroupMember).filter_by(group_id=group_id, user_id=user_id)
        if status is not None:
            query = query.filter_by(status=status)
        return query.first()

    def get_member(self, member_id: int) -> Optional[GroupMember]:
        return self.session.get(GroupMember, member_id)

    def add_member(self, group_id: int, user_id: int, role: str, status: str) -> GroupMember:
        member = GroupMember(group_id=group_id, user_id=user_id, role=role, status=status)
        self.session.add(member)
        return member

    def set_member_status(self, member: GroupMember, status: str) -> GroupMember:
        member.status = status
        member.updated_at = datetime.utcnow()
        return member

    def delete_member(self, member: GroupMember) -> None:
        self.session.delete(member)

    def unshare_member_commitments(self, group_id: int, user_id: int) -> List[Commitment]:
        """Turn the user's commitments shared into ``group_id`` back into personal ones."""
        commitments = self.session.query(Commitment).filter(
            Commitment.user_id == user_id,
            Commitment.shared.is_(True),
            Commitment.group_id == group_id
        ).all()
        for commitment in commitments:
            self.update_commitment(commitment, {'shared': False, 'group_id': None})
        return commitments

    def accepted_group_ids(self, user_id: int) -> List[int]:
        rows = self.session.query(GroupMember.group_id).filter_by(
            user_id=user_id, status=MemberStatus.ACCEPTED.value
        ).all()
        return [row[0] for row in rows]

    def groups_for_user(self, user_id: int) -> List[Group]:
        return self.session.query(Group).join(GroupMember).filter(
            GroupMember.user_id == user_id,
            GroupMember.status == MemberStatus.ACCEPTED.value
        ).order_by(Group.id).all()

    def invitations_for_user(self, user_id: int) -> List[GroupMember]:
        return self.session.query(GroupMember).filter_by(
            user_id=user_id, status=MemberStatus.INVITED.value
        ).order_by(GroupMember.created_at.desc(), GroupMember.id.desc()).all()
