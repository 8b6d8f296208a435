"""User and session API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from src.api.dependencies import AUTH_HEADER, AuthSession, get_auth_session, get_current_user
from src.database import get_db
from src.errors import AuthenticationError
from src.models.user import User
from src.schemas.auth import UserCredentials, UserResponse
from src.services import auth

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse)
def register(
    credentials: UserCredentials,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user and log them in."""
    user = auth.register(db, credentials.email, credentials.password)
    response.headers[AUTH_HEADER] = auth.issue_token(db, user)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=UserResponse)
def login(
    credentials: UserCredentials,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password.

    A failed login answers 400 with an empty body rather than 401.
    """
    try:
        user = auth.authenticate(db, credentials.email, credentials.password)
    except AuthenticationError:
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    response.headers[AUTH_HEADER] = auth.issue_token(db, user)
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return UserResponse.model_validate(current_user)


@router.delete("/me/token")
def logout(
    session: Annotated[AuthSession, Depends(get_auth_session)],
    db: Annotated[Session, Depends(get_db)],
):
    """Logout by revoking the token used for this request."""
    auth.revoke_token(db, session.user, session.token)
    return Response(status_code=status.HTTP_200_OK)
