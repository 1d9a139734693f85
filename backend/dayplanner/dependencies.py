"""Request dependencies shared by the routers."""
from typing import Optional

import pytz
from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from dayplanner.config import settings
from dayplanner.database import get_db
from dayplanner.errors import AuthenticationError, ValidationError
from dayplanner.models.user import User
from dayplanner.services import credential_service, token_service

# auto_error=False so a missing header goes through our own 401 envelope.
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a stored user or fail with 401."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")
    user_id = token_service.verify(credentials.credentials)
    user = credential_service.get_user(db, user_id)
    if user is None:
        raise AuthenticationError("Token user no longer exists")
    return user


def get_viewer_timezone(
    tz: Optional[str] = Query(None, description="IANA zone of the viewer's wall clock"),
) -> pytz.BaseTzInfo:
    name = tz or settings.DISPLAY_TIMEZONE
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise ValidationError(f"tz: unknown time zone '{name}'")
