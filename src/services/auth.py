"""Authentication service for users, passwords and bearer tokens."""

import logging
import secrets
from datetime import UTC, datetime

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import get_settings
from src.errors import (
    AuthenticationError,
    DuplicateEmailError,
    InvalidTokenError,
    ValidationError,
)
from src.models.user import User, UserToken

logger = logging.getLogger(__name__)
settings = get_settings()

AUTH_ACCESS = "auth"

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_email_adapter = TypeAdapter(EmailStr)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def normalize_email(email: str) -> str:
    """Validate an email address and return its canonical lower-case form."""
    try:
        _email_adapter.validate_python(email.strip())
    except PydanticValidationError as e:
        raise ValidationError(f"{email!r} is not a valid email") from e
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def register(db: Session, email: str, password: str) -> User:
    """Create a new user with a hashed password and no tokens."""
    email = normalize_email(email)
    if len(password) < settings.password_min_length:
        raise ValidationError(
            f"Password must be at least {settings.password_min_length} characters"
        )

    if get_user_by_email(db, email):
        raise DuplicateEmailError()

    user = User(email=email, password_hash=get_password_hash(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race against a concurrent registration of the same email
        db.rollback()
        raise DuplicateEmailError() from e
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Authenticate a user by email and password.

    Unknown email and wrong password fail identically.
    """
    user = get_user_by_email(db, email)
    if not user:
        # Spend the same hashing time as a real password check
        pwd_context.dummy_verify()
    if not user or not verify_password(password, user.password_hash):
        logger.info("Rejected login attempt")
        raise AuthenticationError("Incorrect email or password")
    return user


def create_token(user_id: str, access: str = AUTH_ACCESS) -> str:
    """Sign a token embedding the subject id and capability tag."""
    return jwt.encode(
        {
            "_id": user_id,
            "access": access,
            "iat": datetime.now(UTC),
            "jti": secrets.token_hex(8),
        },
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict:
    """Decode and validate a signed token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidTokenError("Invalid token") from e
    if not isinstance(payload.get("_id"), str) or not isinstance(payload.get("access"), str):
        raise InvalidTokenError("Invalid token payload")
    return payload


def issue_token(db: Session, user: User, access: str = AUTH_ACCESS) -> str:
    """Generate a token for the user and append it to their token list."""
    token = create_token(user.id, access)
    db.execute(insert(UserToken).values(user_id=user.id, access=access, token=token))
    db.commit()
    db.expire(user, ["tokens"])
    return token


def resolve_token(db: Session, token: str) -> User:
    """Return the user currently holding this token."""
    payload = decode_token(token)

    user = (
        db.query(User)
        .join(UserToken, UserToken.user_id == User.id)
        .filter(
            User.id == payload["_id"],
            UserToken.access == payload["access"],
            UserToken.token == token,
        )
        .first()
    )
    if user is None:
        raise InvalidTokenError("Token has been revoked")
    return user


def revoke_token(db: Session, user: User, token: str) -> None:
    """Remove a token from the user's token list. Idempotent."""
    result = db.execute(
        delete(UserToken).where(UserToken.user_id == user.id, UserToken.token == token)
    )
    db.commit()
    db.expire(user, ["tokens"])
    logger.info(f"Revoked {result.rowcount} token(s) for user {user.id}")
