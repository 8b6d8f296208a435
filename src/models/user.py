"""User and user token models."""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from src.database import Base, new_object_id


class User(Base):
    """User model for authentication and ownership."""

    __tablename__ = "users"

    id = Column(String(24), primary_key=True, default=new_object_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Relationships
    tokens = relationship(
        "UserToken",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="UserToken.id",
    )
    todos = relationship("Todo", back_populates="owner", cascade="all, delete-orphan")


class UserToken(Base):
    """An active bearer token held by a user.

    One row per token so that login and logout are single INSERT/DELETE
    statements against the user's token list.
    """

    __tablename__ = "user_tokens"
    __table_args__ = (UniqueConstraint("user_id", "access", "token", name="uq_user_token"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)
    access = Column(String(32), nullable=False)  # capability tag, e.g. "auth"
    token = Column(String(512), nullable=False)

    user = relationship("User", back_populates="tokens")
