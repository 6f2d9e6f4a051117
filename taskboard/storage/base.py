"""
Storage interface for users and task logs.

Defines the contract that both persistence backends implement, so the route
layer and views stay agnostic to where records live. Users are addressed by
name rather than id; when names collide the earliest created user wins.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime

from taskboard.models import (
    TaskLog,
    TaskLogCreate,
    TaskStatus,
    User,
    UserCreate,
    utcnow,
)

Clock = Callable[[], datetime]


class StorageError(Exception):
    """Raised when the backing store fails to complete an operation."""

    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation


class Storage(ABC):
    """
    Abstract storage for User and TaskLog records.

    Every method is a single atomic operation from the caller's point of
    view. Implementations raise StorageError on backend failures and never
    raise for missing users; lookups return None or False instead.
    """

    backend: str = "abstract"

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock or utcnow

    # Users

    @abstractmethod
    def list_users(self) -> list[User]:
        """
        Retrieve all users in creation order.

        Returns:
            List of every user, unfiltered and unpaginated

        Raises:
            StorageError: If retrieval fails
        """

    @abstractmethod
    def get_user(self, name: str) -> User | None:
        """
        Retrieve the first user whose name matches exactly.

        Args:
            name: User name to look up

        Returns:
            User or None if no user has that name

        Raises:
            StorageError: If retrieval fails
        """

    @abstractmethod
    def create_user(self, user_in: UserCreate) -> User:
        """
        Create a user with a fresh id.

        Names are not checked for uniqueness. Omitted tasks become an empty
        list.

        Args:
            user_in: Validated user payload

        Returns:
            The created user

        Raises:
            StorageError: If the user cannot be saved
        """

    @abstractmethod
    def delete_user(self, name: str) -> bool:
        """
        Delete the first user with the given name.

        Task logs submitted by the user are kept.

        Args:
            name: User name to delete

        Returns:
            True if a user was removed, False if none matched

        Raises:
            StorageError: If deletion fails
        """

    @abstractmethod
    def update_user_tasks(self, name: str, tasks: list[str]) -> User | None:
        """
        Replace a user's task list wholesale.

        Args:
            name: User name to update
            tasks: New task list; previous entries are discarded

        Returns:
            Updated user or None if no user has that name

        Raises:
            StorageError: If the update fails
        """

    # Task logs

    @abstractmethod
    def create_task_log(self, log_in: TaskLogCreate) -> TaskLog:
        """
        Append a task log stamped with the storage clock.

        Args:
            log_in: Validated log payload

        Returns:
            The created task log

        Raises:
            StorageError: If the log cannot be saved
        """

    @abstractmethod
    def list_task_logs(self) -> list[TaskLog]:
        """Retrieve all task logs, newest first."""

    @abstractmethod
    def list_task_logs_by_user(self, user: str) -> list[TaskLog]:
        """Retrieve logs whose user field equals ``user`` exactly, newest first."""

    @abstractmethod
    def clear_task_logs(self) -> int:
        """Delete every task log and return how many were removed."""

    def close(self) -> None:
        """Release backend resources. Nothing to do by default."""

    def _new_task_log(self, log_in: TaskLogCreate) -> TaskLog:
        return TaskLog(
            user=log_in.user,
            task=log_in.task,
            status=log_in.status or TaskStatus.COMPLETED,
            comment=log_in.comment or None,
            timestamp=self.clock(),
        )

    def _new_user(self, user_in: UserCreate) -> User:
        return User(
            name=user_in.name,
            project=user_in.project,
            tasks=list(user_in.tasks or []),
            created_at=self.clock(),
        )
