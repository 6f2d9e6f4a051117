"""
In-process storage backed by dictionaries.

Records live for the lifetime of the process only. A lock serialises access
because FastAPI runs sync handlers on a worker thread pool.
"""

import threading

from taskboard.core.observability import get_logger, record_storage_operation
from taskboard.models import TaskLog, TaskLogCreate, User, UserCreate
from taskboard.storage.base import Clock, Storage
from taskboard.storage.seed import SAMPLE_USERS

logger = get_logger(__name__)


class MemoryStorage(Storage):
    """Ephemeral storage for development and tests."""

    backend = "memory"

    def __init__(self, clock: Clock | None = None, seed: bool = True) -> None:
        super().__init__(clock)
        self._lock = threading.Lock()
        self._users: dict[str, User] = {}
        self._task_logs: dict[str, TaskLog] = {}

        if seed:
            for user_in in SAMPLE_USERS:
                self.create_user(user_in)
            logger.info("Seeded sample users", count=len(SAMPLE_USERS))

    def _find_user(self, name: str) -> User | None:
        # dicts iterate in insertion order, so the first match is the oldest user
        return next((u for u in self._users.values() if u.name == name), None)

    @staticmethod
    def _copy(user: User) -> User:
        # Callers get their own record, as with rows read from a database.
        return User.model_validate(user.model_dump())

    def list_users(self) -> list[User]:
        with self._lock:
            return [self._copy(u) for u in self._users.values()]

    def get_user(self, name: str) -> User | None:
        with self._lock:
            user = self._find_user(name)
            return self._copy(user) if user else None

    def create_user(self, user_in: UserCreate) -> User:
        user = self._new_user(user_in)
        with self._lock:
            self._users[str(user.id)] = user
            user = self._copy(user)
        record_storage_operation(self.backend, "create_user")
        logger.info("User created", user_id=str(user.id), name=user.name)
        return user

    def delete_user(self, name: str) -> bool:
        with self._lock:
            user = self._find_user(name)
            if not user:
                return False
            del self._users[str(user.id)]
        record_storage_operation(self.backend, "delete_user")
        logger.info("User deleted", user_id=str(user.id), name=name)
        return True

    def update_user_tasks(self, name: str, tasks: list[str]) -> User | None:
        with self._lock:
            user = self._find_user(name)
            if not user:
                return None
            user.tasks = list(tasks)
            user = self._copy(user)
        record_storage_operation(self.backend, "update_user_tasks")
        logger.info("User tasks replaced", name=name, task_count=len(tasks))
        return user

    def create_task_log(self, log_in: TaskLogCreate) -> TaskLog:
        log = self._new_task_log(log_in)
        with self._lock:
            self._task_logs[str(log.id)] = log
        record_storage_operation(self.backend, "create_task_log")
        logger.info(
            "Task log created", log_id=str(log.id), user=log.user, status=log.status
        )
        return log

    def _sorted_logs(self, logs: list[TaskLog]) -> list[TaskLog]:
        # Reverse first so equal timestamps keep newest-inserted first;
        # sorted() is stable under reverse=True.
        return sorted(reversed(logs), key=lambda log: log.timestamp, reverse=True)

    def list_task_logs(self) -> list[TaskLog]:
        with self._lock:
            logs = list(self._task_logs.values())
        return self._sorted_logs(logs)

    def list_task_logs_by_user(self, user: str) -> list[TaskLog]:
        with self._lock:
            logs = [log for log in self._task_logs.values() if log.user == user]
        return self._sorted_logs(logs)

    def clear_task_logs(self) -> int:
        with self._lock:
            removed = len(self._task_logs)
            self._task_logs.clear()
        record_storage_operation(self.backend, "clear_task_logs")
        logger.info("Task logs cleared", removed=removed)
        return removed
