"""Todo schemas."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TodoCreate(BaseModel):
    """Create a new todo."""

    text: str = Field(..., max_length=2000)


class TodoUpdate(BaseModel):
    """Update a todo. Only fields present in the request are applied."""

    text: str | None = Field(None, max_length=2000)
    completed: bool | None = None


class TodoResponse(BaseModel):
    """Todo response."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(..., alias="_id")
    text: str
    completed: bool
    completed_at: int | None = Field(None, alias="completedAt")
    owner_id: str = Field(..., alias="_creator")

    @field_validator("completed_at", mode="before")
    @classmethod
    def to_epoch_millis(cls, value):
        """Render completion time as epoch milliseconds."""
        if isinstance(value, datetime):
            if value.tzinfo is None:
                # SQLite hands back naive datetimes; they are stored as UTC
                value = value.replace(tzinfo=UTC)
            return int(value.timestamp() * 1000)
        return value


class TodoEnvelope(BaseModel):
    """Single todo wrapped under a ``todo`` key."""

    todo: TodoResponse


class TodoListResponse(BaseModel):
    """All todos of the current user."""

    todos: list[TodoResponse]
