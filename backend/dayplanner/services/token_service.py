"""Session token service — stateless signed identity tokens (JWT)."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from dayplanner.config import settings
from dayplanner.errors import TokenExpired, TokenInvalid

logger = logging.getLogger(__name__)


def token_lifetime() -> timedelta:
    return timedelta(days=settings.TOKEN_TTL_DAYS)


def issue(user_id: str, now: Optional[datetime] = None) -> str:
    """Sign a token for ``user_id`` that expires one lifetime after ``now``."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": issued_at,
        "exp": issued_at + token_lifetime(),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify(token: str) -> str:
    """Return the user id embedded in ``token``.

    Raises TokenExpired past the expiry and TokenInvalid for anything that
    does not decode with our secret.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired()
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected token: %s", exc)
        raise TokenInvalid()

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise TokenInvalid()
    return user_id
