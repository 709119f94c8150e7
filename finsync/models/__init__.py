"""
Model package initialization.
"""

from finsync.models.user import User
from finsync.models.monthly_income import MonthlyIncome
from finsync.models.commitment import Commitment, CommitmentType
from finsync.models.commitment_payment import CommitmentPayment
from finsync.models.group import Group, GroupMember, MemberRole, MemberStatus

__all__ = [
    'User',
    'MonthlyIncome',
    'Commitment',
    'CommitmentType',
    'CommitmentPayment',
    'Group',
    'GroupMember',
    'MemberRole',
    'MemberStatus'
]
