"""Todo API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends

from src.api.dependencies import get_current_user, get_todo_service
from src.models.user import User
from src.schemas.todo import (
    TodoCreate,
    TodoEnvelope,
    TodoListResponse,
    TodoResponse,
    TodoUpdate,
)
from src.services.todo_service import TodoService

router = APIRouter(prefix="/todos", tags=["todos"])


@router.post("", response_model=TodoResponse)
def create_todo(
    todo_data: TodoCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TodoService, Depends(get_todo_service)],
):
    """Create a todo owned by the current user."""
    todo = service.create(current_user.id, todo_data.text)
    return TodoResponse.model_validate(todo)


@router.get("", response_model=TodoListResponse)
def get_todos(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TodoService, Depends(get_todo_service)],
):
    """Get all todos of the current user."""
    todos = service.list_for_owner(current_user.id)
    return TodoListResponse(todos=[TodoResponse.model_validate(todo) for todo in todos])


@router.get("/{todo_id}", response_model=TodoEnvelope)
def get_todo(
    todo_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TodoService, Depends(get_todo_service)],
):
    """Get a single todo."""
    todo = service.get_for_owner(current_user.id, todo_id)
    return TodoEnvelope(todo=TodoResponse.model_validate(todo))


@router.patch("/{todo_id}", response_model=TodoEnvelope)
def update_todo(
    todo_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TodoService, Depends(get_todo_service)],
    todo_data: Annotated[TodoUpdate | None, Body()] = None,
):
    """Update text and/or completion of a todo."""
    patch = todo_data.model_dump(exclude_unset=True) if todo_data else {}
    todo = service.update_for_owner(current_user.id, todo_id, patch)
    return TodoEnvelope(todo=TodoResponse.model_validate(todo))


@router.delete("/{todo_id}", response_model=TodoEnvelope)
def delete_todo(
    todo_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[TodoService, Depends(get_todo_service)],
):
    """Delete a todo and return it."""
    todo = service.delete_for_owner(current_user.id, todo_id)
    return TodoEnvelope(todo=TodoResponse.model_validate(todo))
