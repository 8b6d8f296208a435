"""FastAPI dependencies for authentication and services."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from src.database import get_db
from src.errors import InvalidTokenError
from src.models.user import User
from src.services.auth import resolve_token
from src.services.todo_service import TodoService

AUTH_HEADER = "x-auth"


@dataclass(frozen=True)
class AuthSession:
    """The authenticated caller and the token they presented."""

    user: User
    token: str


def get_auth_session(
    db: Annotated[Session, Depends(get_db)],
    x_auth: Annotated[str | None, Header()] = None,
) -> AuthSession:
    """Resolve the ``x-auth`` header to the user holding that token.

    Raises InvalidTokenError, which is rendered as an empty 401 before the
    route handler runs.
    """
    if not x_auth:
        raise InvalidTokenError("Missing token")
    user = resolve_token(db, x_auth)
    return AuthSession(user=user, token=x_auth)


def get_current_user(
    session: Annotated[AuthSession, Depends(get_auth_session)],
) -> User:
    """Get the current authenticated user."""
    return session.user


def get_todo_service(
    db: Annotated[Session, Depends(get_db)],
) -> TodoService:
    """Get todo service with dependencies."""
    return TodoService(db)
