"""
Group and membership models for shared commitments.
"""

from finsync import db
from datetime import datetime
from enum import Enum


class MemberRole(str, Enum):
    """Role of a user inside a group."""
    OWNER = "owner"
    MEMBER = "member"


class MemberStatus(str, Enum):
    """Invitation lifecycle. There is no declined state."""
    INVITED = "invited"
    ACCEPTED = "accepted"


class Group(db.Model):
    """A named set of users that can see each other's shared commitments."""

    __tablename__ = 'groups'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    owner = db.relationship('User', foreign_keys=[owner_id])
    members = db.relationship('GroupMember', backref='group', lazy=True, cascade='all, delete-orphan',
                              order_by='GroupMember.id')
    commitments = db.relationship('Commitment', backref='group', lazy=True)

    @property
    def accepted_members(self):
        return [m for m in self.members if m.status == MemberStatus.ACCEPTED.value]

    def to_dict(self, include_members: bool = True) -> dict:
        data = {
            'id': self.id,
            'name': self.name,
            'ownerId': self.owner_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }
        if include_members:
            data['members'] = [m.to_dict() for m in self.members]
        return data

    def __repr__(self) -> str:
        return f'<Group {self.name}>'


class GroupMember(db.Model):
    """Membership of one user in one group."""

    __tablename__ = 'group_members'

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    role = db.Column(db.String(10), nullable=False, default=MemberRole.MEMBER.value)
    status = db.Column(db.String(10), nullable=False, default=MemberStatus.INVITED.value)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = db.relationship('User')

    __table_args__ = (
        db.UniqueConstraint('group_id', 'user_id', name='uq_group_member'),
    )

    @property
    def is_accepted(self) -> bool:
        return self.status == MemberStatus.ACCEPTED.value

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'groupId': self.group_id,
            'userId': self.user_id,
            'email': self.user.email if self.user else None,
            'role': self.role,
            'status': self.status,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self) -> str:
        return f'<GroupMember group_id={self.group_id} user_id={self.user_id} {self.status}>'
