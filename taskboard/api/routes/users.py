"""
User management routes.

Users are addressed by name in the path; the generated id is returned but
never accepted as a lookup key.
"""

from fastapi import APIRouter, HTTPException, status

from taskboard.api.deps import StorageDep
from taskboard.core.observability import get_logger
from taskboard.models import Message, UserCreate, UserPublic
from taskboard.storage import StorageError

logger = get_logger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserPublic])
def list_users(storage: StorageDep):
    """List every user."""
    try:
        return storage.list_users()
    except StorageError as e:
        logger.error("Failed to fetch users", error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch users",
        )


@router.post("", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def create_user(user_in: UserCreate, storage: StorageDep):
    """Create a user. Tasks default to an empty list."""
    try:
        return storage.create_user(user_in)
    except StorageError as e:
        logger.error("Failed to create user", name=user_in.name, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user",
        )


@router.delete("/{name:path}", response_model=Message)
def delete_user(name: str, storage: StorageDep):
    """Delete the first user with this name. Their task logs are kept."""
    try:
        deleted = storage.delete_user(name)
    except StorageError as e:
        logger.error("Failed to delete user", name=name, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete user",
        )

    if not deleted:
        raise HTTPException(status_code=404, detail="User not found")
    return Message(detail="User deleted successfully")
