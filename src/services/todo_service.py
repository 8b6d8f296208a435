"""Todo service for owner-scoped CRUD."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from src.database import is_valid_object_id
from src.errors import NotFoundError, ValidationError
from src.models.todo import Todo

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("text", "completed")


def _clean_text(text: Any) -> str:
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Todo text must not be empty")
    return text.strip()


class TodoService:
    """Service for todo operations, always scoped to the owning user."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, owner_id: str, text: str) -> Todo:
        """Create a new, not yet completed todo."""
        todo = Todo(
            text=_clean_text(text),
            completed=False,
            completed_at=None,
            owner_id=owner_id,
        )
        self.db.add(todo)
        self.db.commit()
        self.db.refresh(todo)
        logger.debug(f"Created todo {todo.id} for user {owner_id}")
        return todo

    def list_for_owner(self, owner_id: str) -> list[Todo]:
        """Get all todos of a user in insertion order."""
        # Ids are ObjectIds, which sort by creation time within a process
        return self.db.query(Todo).filter(Todo.owner_id == owner_id).order_by(Todo.id).all()

    def get_for_owner(self, owner_id: str, todo_id: str) -> Todo:
        """Get a todo by id.

        Malformed ids, missing records and records of other users are
        indistinguishable to the caller.
        """
        if not is_valid_object_id(todo_id):
            raise NotFoundError("Todo not found")

        todo = (
            self.db.query(Todo).filter(Todo.id == todo_id, Todo.owner_id == owner_id).first()
        )
        if not todo:
            raise NotFoundError("Todo not found")
        return todo

    def update_for_owner(self, owner_id: str, todo_id: str, patch: dict[str, Any]) -> Todo:
        """Apply a partial update limited to text and completed."""
        todo = self.get_for_owner(owner_id, todo_id)
        changes = {key: patch[key] for key in UPDATABLE_FIELDS if key in patch}

        # Validate the whole patch before touching the record
        if "text" in changes:
            changes["text"] = _clean_text(changes["text"])
        if "completed" in changes and not isinstance(changes["completed"], bool):
            raise ValidationError("completed must be a boolean")

        if "text" in changes:
            todo.text = changes["text"]

        if "completed" in changes:
            completed = changes["completed"]
            if completed and not todo.completed:
                todo.completed_at = datetime.now(UTC)
            elif not completed:
                todo.completed_at = None
            todo.completed = completed

        self.db.commit()
        self.db.refresh(todo)
        logger.debug(f"Updated todo {todo.id}: {sorted(changes)}")
        return todo

    def delete_for_owner(self, owner_id: str, todo_id: str) -> Todo:
        """Delete a todo and return the removed record."""
        todo = self.get_for_owner(owner_id, todo_id)
        # Detach first so the returned record keeps its loaded state after commit
        self.db.expunge(todo)
        self.db.query(Todo).filter(Todo.id == todo.id, Todo.owner_id == owner_id).delete()
        self.db.commit()
        logger.debug(f"Deleted todo {todo_id}")
        return todo
