"""
User model. Identity comes from the external auth provider; this row is
created on first sync and carries a cached income snapshot.
"""

from finsync import db
from finsync.utils.money import format_money
from datetime import datetime


class User(db.Model):
    """Application user keyed by email."""

    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)

    # Latest income written for any month
    monthly_income = db.Column(db.Numeric(10, 2), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    commitments = db.relationship('Commitment', backref='owner', lazy=True)
    incomes = db.relationship('MonthlyIncome', backref='user', lazy=True, cascade='all, delete-orphan')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'email': self.email,
            'monthlyIncome': format_money(self.monthly_income),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self) -> str:
        return f'<User {self.email}>'
