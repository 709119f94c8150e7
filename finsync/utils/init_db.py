"""
Database initialization utilities.
"""

from finsync import db
from finsync.models.user import User
from finsync.models.commitment import Commitment, CommitmentType
from finsync.store import get_store
from finsync.utils.months import current_month, validate_month
from decimal import Decimal
from datetime import date
import click
import os

DEMO_COMMITMENTS = [
    {'title': 'Rent', 'category': 'Housing', 'amount': Decimal('1200.00'), 'type': CommitmentType.STATIC.value},
    {'title': 'Car Payment', 'category': 'Transportation', 'amount': Decimal('350.00'),
     'type': CommitmentType.STATIC.value},
    {'title': 'Groceries', 'category': 'Food', 'amount': Decimal('400.00'), 'type': CommitmentType.DYNAMIC.value},
]


def init_demo_data(month: str = None) -> User:
    """Create the demo user, this month's income and a few commitments if missing."""
    store = get_store()
    demo_email = os.getenv('DEMO_EMAIL', 'demo@finsync.com')
    demo_income = Decimal(os.getenv('DEMO_INCOME', '5000.00'))
    month = validate_month(month) if month else current_month()

    user = store.get_user_by_email(demo_email)
    if not user:
        user = store.create_user(demo_email)
        store.flush()

    if not store.get_monthly_income(user.id, month):
        store.upsert_monthly_income(user.id, month, demo_income)
        store.set_user_income_snapshot(user, demo_income)

    existing_titles = {c.title for c in store.list_commitments_for_user(user.id)}
    for item in DEMO_COMMITMENTS:
        if item['title'] in existing_titles:
            continue
        store.add_commitment(
            user_id=user.id,
            recurring=True,
            shared=False,
            is_imported=False,
            start_date=date.today(),
            **item
        )

    store.commit()
    return user


def register_commands(app):
    """Attach CLI commands to the app."""

    @app.cli.command('seed-demo')
    @click.option('--month', default=None, help='Month (YYYY-MM) to seed income for.')
    def seed_demo(month):
        """Seed a demo user with income and commitments."""
        user = init_demo_data(month)
        count = db.session.query(Commitment).filter_by(user_id=user.id).count()
        click.echo(f"Demo user ready: {user.email} ({count} commitments)")
