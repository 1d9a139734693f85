"""Credential store: user registration and password verification."""
import logging
from functools import lru_cache
from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dayplanner.config import settings
from dayplanner.errors import DuplicateUser, InvalidCredentials, ValidationError
from dayplanner.models.user import User
from dayplanner.schemas.user import PASSWORD_MAX_BYTES, UserOut

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _secret(raw_password: str) -> Optional[bytes]:
    """UTF-8 bytes of the password, or None past bcrypt's 72-byte limit."""
    secret = raw_password.encode("utf-8")
    return secret if len(secret) <= PASSWORD_MAX_BYTES else None


def hash_password(raw_password: str) -> str:
    """Salted one-way hash, stored as the ASCII bcrypt string."""
    secret = _secret(raw_password)
    if secret is None:
        raise ValidationError(f"password: must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(secret, salt).decode("ascii")


def check_password(raw_password: str, password_hash: str) -> bool:
    """Constant-time check; over-long passwords never match a stored hash."""
    secret = _secret(raw_password)
    if secret is None:
        bcrypt.checkpw(b"", password_hash.encode("ascii"))
        return False
    return bcrypt.checkpw(secret, password_hash.encode("ascii"))


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("dayplanner-unknown-user")


def public_identity(user: User) -> UserOut:
    return UserOut(id=user.user_id, email=user.email)


def register(db: Session, email: str, raw_password: str) -> UserOut:
    """Create a user; raises DuplicateUser if the email is already taken."""
    email = normalize_email(email)
    if db.query(User).filter(User.email == email).first():
        raise DuplicateUser()

    user = User(email=email, password_hash=hash_password(raw_password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email.
        db.rollback()
        raise DuplicateUser()
    db.refresh(user)
    logger.info("Registered user %s", user.user_id)
    return public_identity(user)


def verify(db: Session, email: str, raw_password: str) -> UserOut:
    """Return the user's identity if the password matches.

    Unknown emails are still checked against a dummy hash so that both
    failure paths take the same time and raise the same error.
    """
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        check_password(raw_password, _dummy_hash())
        raise InvalidCredentials()
    if not check_password(raw_password, user.password_hash):
        raise InvalidCredentials()
    return public_identity(user)


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.user_id == user_id).first()
