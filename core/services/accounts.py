import logging

from core import errors

logger = logging.getLogger(__name__)


def login(store, username: str, password: str):
    """Check the credentials and record the login.

    Unknown users and wrong passwords fail the same way; only the username
    is logged.
    """
    if not username or not password:
        raise errors.ValidationError('Username and password are required')
    try:
        account = store.authenticate(username, password)
    except errors.InvalidCredentials:
        logger.info("Failed login for %r", username)
        raise
    logger.info("User %s logged in (login #%s)", account.username, account.login_count)
    return account
