"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UserCredentials(BaseModel):
    """Email/password pair used for both registration and login.

    Format rules (email shape, password length) are enforced by the
    auth service so that direct callers get the same checks.
    """

    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)


class UserResponse(BaseModel):
    """Public user fields."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(..., alias="_id")
    email: str
