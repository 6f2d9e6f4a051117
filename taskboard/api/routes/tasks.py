from fastapi import APIRouter, HTTPException, status

from taskboard.api.deps import StorageDep
from taskboard.core.observability import get_logger
from taskboard.models import UserPublic, UserTasks, UserTasksUpdate
from taskboard.storage import StorageError

logger = get_logger(__name__)
router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/{user:path}", response_model=UserTasks)
def get_user_tasks(user: str, storage: StorageDep):
    """Get the tasks assigned to a user."""
    try:
        found = storage.get_user(user)
    except StorageError as e:
        logger.error("Failed to fetch tasks", user=user, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch tasks",
        )

    if not found:
        raise HTTPException(status_code=404, detail="User not found")
    return UserTasks(tasks=found.tasks)


@router.post("/{user:path}", response_model=UserPublic)
def update_user_tasks(user: str, body: UserTasksUpdate, storage: StorageDep):
    """Replace a user's task list with the one in the body."""
    try:
        updated = storage.update_user_tasks(user, body.tasks)
    except StorageError as e:
        logger.error("Failed to update tasks", user=user, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update tasks",
        )

    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    return updated
