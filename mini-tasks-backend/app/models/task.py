# File: app/models/task.py

"""
Task model.

Every task has exactly one owner (``user_id``), set from the authenticated
caller at creation time and never reassigned.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, case
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.user import utcnow


class TaskPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default=TaskPriority.medium.value)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    owner: Mapped["User"] = relationship(back_populates="tasks")  # noqa: F821


# high -> medium -> low, for ORDER BY
PRIORITY_RANK = case(
    {
        TaskPriority.high.value: 0,
        TaskPriority.medium.value: 1,
        TaskPriority.low.value: 2,
    },
    value=Task.priority,
    else_=3,
)
