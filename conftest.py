"""
Shared pytest fixtures: an app on in-memory SQLite, its client and store.
"""

import pytest

from finsync import create_app, db
from finsync.services.commitments import create_commitment
from finsync.store import RecordStore


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app) -> RecordStore:
    return app.extensions['record_store']


@pytest.fixture
def make_user(store):
    """Factory creating users by email."""
    def _make_user(email):
        user = store.create_user(email)
        store.commit()
        return user
    return _make_user


@pytest.fixture
def make_commitment(store):
    """Factory creating a commitment through the service layer."""
    def _make_commitment(user, title='Rent', amount='100.00', **overrides):
        data = {
            'userId': user.id,
            'type': 'static',
            'title': title,
            'category': 'General',
            'amount': amount,
            'startDate': '2025-01-01',
        }
        data.update(overrides)
        return create_commitment(store, data)
    return _make_commitment


@pytest.fixture
def alice(make_user):
    return make_user('alice@example.com')


@pytest.fixture
def bob(make_user):
    return make_user('bob@example.com')


@pytest.fixture
def carol(make_user):
    return make_user('carol@example.com')
