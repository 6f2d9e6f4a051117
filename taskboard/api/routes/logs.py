"""
Task log routes.

Logs are append-only through this API; the only removal is the bulk clear.
"""

from fastapi import APIRouter, HTTPException, Query, status

from taskboard.api.deps import StorageDep
from taskboard.core.observability import get_logger
from taskboard.models import Message, TaskLogCreate, TaskLogPublic
from taskboard.storage import StorageError

logger = get_logger(__name__)
router = APIRouter(prefix="/logs", tags=["logs"])


@router.post("", response_model=TaskLogPublic, status_code=status.HTTP_201_CREATED)
def create_task_log(log_in: TaskLogCreate, storage: StorageDep):
    """Record a task submission. Status defaults to COMPLETED."""
    try:
        return storage.create_task_log(log_in)
    except StorageError as e:
        logger.error("Failed to create task log", user=log_in.user, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create task log",
        )


@router.get("", response_model=list[TaskLogPublic])
def list_task_logs(
    storage: StorageDep,
    user: str | None = Query(None, description="Only logs submitted by this user"),
):
    """List task logs newest first, optionally for one user."""
    try:
        if user:
            return storage.list_task_logs_by_user(user)
        return storage.list_task_logs()
    except StorageError as e:
        logger.error("Failed to fetch task logs", user=user, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch task logs",
        )


@router.delete("", response_model=Message)
def clear_task_logs(storage: StorageDep):
    """Delete every task log."""
    try:
        removed = storage.clear_task_logs()
    except StorageError as e:
        logger.error("Failed to clear task logs", error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to clear task logs",
        )

    logger.info("Task logs cleared via API", removed=removed)
    return Message(detail="Task logs cleared")
