from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from expense_tracker.errors import AuthError, ConflictError, ValidationError
from expense_tracker.security.passwords import hash_password, verify_password
from expense_tracker.users.models import User

INVALID_CREDENTIALS = "Invalid credentials."


def _is_blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


def get_user_by_name(db: Session, name: str):
    return db.query(User).filter(User.name == name).first()


def create_user(db: Session, name: str, password: str, relation: str, is_admin: bool = False) -> User:
    if _is_blank(name) or _is_blank(password) or _is_blank(relation):
        raise ValidationError("All fields are required.")

    name = name.strip()

    if get_user_by_name(db, name):
        raise ConflictError("User already registered.")

    new_user = User(
        name=name,
        password_hash=hash_password(password),
        relation=relation.strip(),
        is_admin=is_admin,
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        db.rollback()
        raise ConflictError("User already registered.")
    db.refresh(new_user)
    return new_user


def register(db: Session, name: str, password: str, relation: str) -> User:
    user = create_user(db, name, password, relation)
    logger.info(f"User registered: {user.name}")
    return user


def authenticate(db: Session, name: str, password: str) -> User:
    if _is_blank(name) or _is_blank(password):
        raise ValidationError("Name and password are required.")

    name = name.strip()
    user = get_user_by_name(db, name)

    # Unknown name and wrong password must be indistinguishable
    if not verify_password(password, user.password_hash if user else None):
        logger.warning(f"Authentication denied for name: {name}")
        raise AuthError(INVALID_CREDENTIALS)

    logger.info(f"User authenticated: {name}")
    return user
