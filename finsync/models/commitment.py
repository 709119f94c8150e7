"""
Commitment model for recurring and one-off financial obligations.
"""

from finsync import db
from finsync.utils.money import format_money
from datetime import datetime
from enum import Enum


class CommitmentType(str, Enum):
    """Amount stability of a commitment."""
    STATIC = "static"    # same amount every month
    DYNAMIC = "dynamic"  # estimate, real amount set when paid


class Commitment(db.Model):
    """A bill, rent, subscription or other obligation owned by one user."""

    __tablename__ = 'commitments'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    # Details
    type = db.Column(db.String(10), nullable=False, default=CommitmentType.STATIC.value)
    title = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(100), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    recurring = db.Column(db.Boolean, nullable=False, default=False)
    start_date = db.Column(db.Date, nullable=True)

    # Sharing - group_id is only set while shared is true
    shared = db.Column(db.Boolean, nullable=False, default=False)
    group_id = db.Column(db.Integer, db.ForeignKey('groups.id'), nullable=True, index=True)

    # Bulk import
    is_imported = db.Column(db.Boolean, nullable=False, default=False)
    imported_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    payments = db.relationship('CommitmentPayment', backref='commitment', lazy=True,
                               cascade='all, delete-orphan')

    @property
    def is_personal(self) -> bool:
        return not self.shared and not self.is_imported

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'userId': self.user_id,
            'type': self.type,
            'title': self.title,
            'category': self.category,
            'amount': format_money(self.amount),
            'recurring': self.recurring,
            'shared': self.shared,
            'groupId': self.group_id,
            'isImported': self.is_imported,
            'importedAt': self.imported_at.isoformat() if self.imported_at else None,
            'startDate': self.start_date.isoformat() if self.start_date else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self) -> str:
        return f'<Commitment {self.title} - {self.amount} ({self.type})>'
