import getpass

from passlib.context import CryptContext

from expense_tracker.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(plain_password: str) -> str:
    """Return a salted bcrypt hash for plain_password."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, stored_hash: str | None) -> bool:
    """Verify a candidate password against a stored bcrypt hash.

    With no stored hash a dummy verification still runs, so the time taken
    does not reveal whether the account exists.
    """
    if not stored_hash:
        pwd_context.dummy_verify()
        return False
    try:
        return pwd_context.verify(plain_password, stored_hash)
    except ValueError:
        # Malformed hash in storage
        return False


def prompt_hidden(prompt_text: str) -> str:
    return getpass.getpass(prompt_text)
