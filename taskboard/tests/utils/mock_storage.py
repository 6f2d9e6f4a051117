"""
Test doubles for the storage layer.
"""

from datetime import datetime, timedelta

from taskboard.models import TaskLog, TaskLogCreate, User, UserCreate
from taskboard.storage import Storage, StorageError


class TickingClock:
    """Clock that advances one second per call, so ordering is deterministic."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 9, 0, 0)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class FrozenClock:
    """Clock that always returns the same instant."""

    def __init__(self, instant: datetime | None = None):
        self.instant = instant or datetime(2024, 1, 1, 9, 0, 0)

    def __call__(self) -> datetime:
        return self.instant


class FailingStorage(Storage):
    """Storage whose every operation fails like an unreachable database."""

    backend = "failing"

    def __init__(self):
        super().__init__()
        self.calls: list[str] = []

    def _fail(self, operation: str):
        self.calls.append(operation)
        raise StorageError(f"connection refused during {operation}", operation)

    def list_users(self) -> list[User]:
        self._fail("list_users")

    def get_user(self, name: str) -> User | None:
        self._fail("get_user")

    def create_user(self, user_in: UserCreate) -> User:
        self._fail("create_user")

    def delete_user(self, name: str) -> bool:
        self._fail("delete_user")

    def update_user_tasks(self, name: str, tasks: list[str]) -> User | None:
        self._fail("update_user_tasks")

    def create_task_log(self, log_in: TaskLogCreate) -> TaskLog:
        self._fail("create_task_log")

    def list_task_logs(self) -> list[TaskLog]:
        self._fail("list_task_logs")

    def list_task_logs_by_user(self, user: str) -> list[TaskLog]:
        self._fail("list_task_logs_by_user")

    def clear_task_logs(self) -> int:
        self._fail("clear_task_logs")
