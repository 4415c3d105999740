# File: app/services/task_service.py

"""
Task service.

Every operation takes the caller's AuthContext. Listing filters by owner in
SQL; per-task operations go through ``authorize_task_access`` and then repeat
the owner predicate in the mutating statement itself.
"""

import logging
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from app.core.errors import NotFound, PermissionDenied
from app.models.task import PRIORITY_RANK, Task, TaskPriority
from app.models.user import utcnow
from app.services.auth_service import AuthContext

logger = logging.getLogger(__name__)


def _owned(task_id: str, auth: AuthContext):
    return (Task.id == task_id, Task.user_id == auth.user_id)


def authorize_task_access(db: Session, auth: AuthContext, task_id: str) -> None:
    """
    NotFound if the task doesn't exist, PermissionDenied if the caller
    doesn't own it.
    """
    owner_id = db.scalar(select(Task.user_id).where(Task.id == task_id))
    if owner_id is None:
        raise NotFound("Task not found")
    if owner_id != auth.user_id:
        logger.warning("User %s denied access to task %s", auth.user_id, task_id)
        raise PermissionDenied("You do not have access to this task")


def list_tasks(db: Session, auth: AuthContext) -> dict:
    tasks = list(
        db.scalars(
            select(Task)
            .where(Task.user_id == auth.user_id)
            .order_by(PRIORITY_RANK, Task.created_at, Task.id)
        )
    )
    completed = sum(1 for t in tasks if t.completed)
    return {
        "tasks": tasks,
        "total": len(tasks),
        "completed": completed,
        "pending": len(tasks) - completed,
    }


def create_task(
    db: Session,
    auth: AuthContext,
    *,
    title: str,
    description: Optional[str] = None,
    priority: TaskPriority = TaskPriority.medium,
) -> Task:
    task = Task(
        title=title,
        description=description,
        priority=TaskPriority(priority).value,
        completed=False,
        user_id=auth.user_id,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("User %s created task %s", auth.user_id, task.id)
    return task


def get_task(db: Session, auth: AuthContext, task_id: str) -> Task:
    authorize_task_access(db, auth, task_id)
    task = db.scalars(select(Task).where(*_owned(task_id, auth))).first()
    if task is None:
        raise NotFound("Task not found")
    return task


def update_task(db: Session, auth: AuthContext, task_id: str, *, completed: bool) -> Task:
    authorize_task_access(db, auth, task_id)

    result = db.execute(
        update(Task)
        .where(*_owned(task_id, auth))
        .values(completed=completed, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        # deleted between the check and the update
        db.rollback()
        raise NotFound("Task not found")
    db.commit()

    return get_task(db, auth, task_id)


def delete_task(db: Session, auth: AuthContext, task_id: str) -> None:
    """Delete a task. Deleting an id that doesn't exist is a no-op."""
    try:
        authorize_task_access(db, auth, task_id)
    except NotFound:
        logger.info("Delete of missing task %s ignored", task_id)
        return

    db.execute(
        delete(Task)
        .where(*_owned(task_id, auth))
        .execution_options(synchronize_session=False)
    )
    db.commit()
    logger.info("User %s deleted task %s", auth.user_id, task_id)

