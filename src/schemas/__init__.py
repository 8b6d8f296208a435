"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import UserCredentials, UserResponse
from src.schemas.todo import (
    TodoCreate,
    TodoEnvelope,
    TodoListResponse,
    TodoResponse,
    TodoUpdate,
)

__all__ = [
    "UserCredentials",
    "UserResponse",
    "TodoCreate",
    "TodoUpdate",
    "TodoResponse",
    "TodoEnvelope",
    "TodoListResponse",
]
