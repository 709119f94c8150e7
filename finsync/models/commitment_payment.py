"""
Payment record marking a commitment as satisfied for one month.
"""

from finsync import db
from finsync.utils.money import format_money
from datetime import datetime


class CommitmentPayment(db.Model):
    """At most one row per (commitment, month); its presence means paid."""

    __tablename__ = 'commitment_payments'

    id = db.Column(db.Integer, primary_key=True)
    commitment_id = db.Column(db.Integer, db.ForeignKey('commitments.id'), nullable=False, index=True)
    month = db.Column(db.String(7), nullable=False, index=True)
    paid_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    amount_paid = db.Column(db.Numeric(10, 2), nullable=False)
    paid_at = db.Column(db.DateTime, default=datetime.utcnow)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('commitment_id', 'month', name='uq_commitment_month_payment'),
    )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'commitmentId': self.commitment_id,
            'month': self.month,
            'paidBy': self.paid_by,
            'amountPaid': format_money(self.amount_paid),
            'paidAt': self.paid_at.isoformat() if self.paid_at else None
        }

    def __repr__(self) -> str:
        return f'<CommitmentPayment commitment_id={self.commitment_id} month={self.month}>'
