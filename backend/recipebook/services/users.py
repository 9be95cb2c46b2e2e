"""User registry: the identity lookup the catalog consults, plus registration.

Passwords arrive already hashed; hashing belongs to the auth layer.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from recipebook.errors import DuplicateUser, InvalidName, StorageError
from recipebook.logging import get_logger
from recipebook.storage.models import User
from recipebook.storage.repositories import email_taken, get_user_by_username, username_taken

logger = get_logger(__name__)

MIN_USERNAME_LENGTH = 6


def find_by_username(session: Session, username: str) -> Optional[User]:
    return get_user_by_username(session, username)


def _require_token(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise InvalidName(f"{label} cannot be empty")
    if " " in value:
        raise InvalidName(f"{label} cannot contain a space")
    return value


def register_user(
    session: Session,
    *,
    username: str,
    email: str,
    password_hash: str,
    first_name: str,
    last_name: str,
) -> User:
    username = _require_token(username, "Username")
    if len(username) < MIN_USERNAME_LENGTH:
        raise InvalidName(f"Username must be at least {MIN_USERNAME_LENGTH} characters")
    email = _require_token(email, "Email")
    if not password_hash or not password_hash.strip():
        raise InvalidName("Password cannot be empty")
    first_name = _require_token(first_name, "First name")
    last_name = _require_token(last_name, "Last name")

    if username_taken(session, username):
        raise DuplicateUser("Username already exists")
    if email_taken(session, email):
        raise DuplicateUser("Email already registered")

    user = User(
        username=username,
        email=email,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
    )
    try:
        session.add(user)
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        logger.warning("user.create_conflict username=%s email=%s", username, email)
        raise DuplicateUser("Username or email already exists") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("user.create_failed username=%s", username)
        raise StorageError("Could not save user") from exc
    session.refresh(user)
    logger.info("user.created id=%s username=%s", user.id, user.username)
    return user
