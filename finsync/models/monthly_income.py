"""
Monthly income tracking, one row per user per month token.
"""

from finsync import db
from finsync.utils.money import format_money
from datetime import datetime


class MonthlyIncome(db.Model):
    """Income a user recorded for a single "YYYY-MM" month."""

    __tablename__ = 'monthly_incomes'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    month = db.Column(db.String(7), nullable=False, index=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Unique constraint: one income record per user per month
    __table_args__ = (
        db.UniqueConstraint('user_id', 'month', name='uq_user_month_income'),
    )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'userId': self.user_id,
            'month': self.month,
            'amount': format_money(self.amount),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self) -> str:
        return f'<MonthlyIncome user_id={self.user_id} month={self.month} amount={self.amount}>'
