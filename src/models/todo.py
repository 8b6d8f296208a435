"""Todo model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from src.database import Base, new_object_id


class Todo(Base):
    """A single todo owned by one user."""

    __tablename__ = "todos"

    id = Column(String(24), primary_key=True, default=new_object_id)
    text = Column(Text, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    owner_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)

    owner = relationship("User", back_populates="todos")
