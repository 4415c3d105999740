# File: app/schemas/task.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.task import TaskPriority


class TaskBase(BaseModel):
    title: str = Field(max_length=255)
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.medium


class TaskCreate(TaskBase):
    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be empty")
        return v


class TaskUpdate(BaseModel):
    completed: bool


class TaskRead(TaskBase):
    id: str
    completed: bool
    user_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TaskListResponse(BaseModel):
    tasks: List[TaskRead]
    total: int
    completed: int
    pending: int
