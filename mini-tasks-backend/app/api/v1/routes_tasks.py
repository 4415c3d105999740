# File: app/api/v1/routes_tasks.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_auth_context, get_db
from app.schemas.task import TaskCreate, TaskListResponse, TaskRead, TaskUpdate
from app.services import task_service
from app.services.auth_service import AuthContext

router = APIRouter()


@router.get(
    "",
    response_model=TaskListResponse,
    summary="List the caller's tasks",
)
def list_tasks(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Tasks are ordered high -> medium -> low, oldest first within a priority.
    """
    return task_service.list_tasks(db, auth)


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
)
def create_task(
    payload: TaskCreate,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return task_service.create_task(
        db,
        auth,
        title=payload.title,
        description=payload.description,
        priority=payload.priority,
    )


@router.get("/{task_id}", response_model=TaskRead, summary="Get task")
def get_task(
    task_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return task_service.get_task(db, auth, task_id)


@router.put("/{task_id}", response_model=TaskRead, summary="Mark task completed / pending")
def update_task(
    task_id: str,
    payload: TaskUpdate,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    return task_service.update_task(db, auth, task_id, completed=payload.completed)


@router.delete("/{task_id}", summary="Delete task")
def delete_task(
    task_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Deleting a task that doesn't exist succeeds without doing anything.
    """
    task_service.delete_task(db, auth, task_id)
    return {"ok": True}
