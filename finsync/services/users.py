"""
User sync. Authentication happens at the identity provider; on first
sign-in the client calls sync and we create the matching row.
"""

import logging

from email_validator import validate_email, EmailNotValidError

from finsync.models.user import User
from finsync.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def sync_user(store, email):
    """Get or create the user for ``email``.

    Returns:
        Tuple of (user, created)
    """
    if not email or not isinstance(email, str):
        raise ValidationError('email is required', field='email')

    try:
        email_info = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError(f'Invalid email: {str(e)}', field='email')
    email = email_info.normalized.lower()

    user = store.get_user_by_email(email)
    if user:
        return user, False

    user = store.create_user(email)
    store.commit()
    logger.info("Created user %s", user.id)
    return user, True


def get_user_or_404(store, user_id: int) -> User:
    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError('User not found')
    return user
