"""Authentication API routes — register, login, profile."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dayplanner.database import get_db
from dayplanner.dependencies import get_current_user
from dayplanner.models.user import User
from dayplanner.schemas.user import AuthResponse, Credentials, LoginCredentials, UserOut
from dayplanner.services import credential_service, token_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: Credentials, db: Session = Depends(get_db)):
    """Create an account and return a session token for it."""
    user = credential_service.register(db, payload.email, payload.password)
    return AuthResponse(token=token_service.issue(user.id), user=user)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginCredentials, db: Session = Depends(get_db)):
    """Exchange email and password for a session token."""
    user = credential_service.verify(db, payload.email, payload.password)
    logger.info("User %s logged in", user.id)
    return AuthResponse(token=token_service.issue(user.id), user=user)


@router.get("/profile", response_model=UserOut)
def profile(user: User = Depends(get_current_user)):
    return credential_service.public_identity(user)
