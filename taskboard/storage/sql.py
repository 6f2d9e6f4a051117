"""
Relational storage implementation using SQLModel.

Each operation opens its own session and commits before returning, so a
request never holds a transaction across storage calls. SQLAlchemy failures
are rolled back and surfaced as StorageError.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy import delete, func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from taskboard.core.db import create_tables
from taskboard.core.observability import get_logger, record_storage_operation
from taskboard.models import TaskLog, TaskLogCreate, User, UserCreate
from taskboard.storage.base import Clock, Storage, StorageError
from taskboard.storage.seed import SAMPLE_USERS

logger = get_logger(__name__)

T = TypeVar("T")


class SQLStorage(Storage):
    """Durable storage over the ``users`` and ``task_logs`` tables."""

    backend = "sql"

    def __init__(self, engine: Engine, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.engine = engine

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        with Session(self.engine, expire_on_commit=False) as session:
            try:
                yield session
            except SQLAlchemyError as e:
                session.rollback()
                record_storage_operation(self.backend, operation, ok=False)
                logger.error(
                    "Storage operation failed",
                    operation=operation,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise StorageError(
                    f"Database error during {operation}: {e}", operation
                ) from e
        record_storage_operation(self.backend, operation)

    def _run(self, operation: str, fn: Callable[[Session], T]) -> T:
        with self._session(operation) as session:
            return fn(session)

    def bootstrap(self, seed: bool = True) -> None:
        """
        Create tables and seed sample users into an empty users table.

        Meant to run once at process start. Safe to repeat: seeding is
        skipped whenever any user already exists.
        """
        try:
            create_tables(self.engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not create tables: {e}", "bootstrap") from e

        if not seed:
            return

        with self._session("bootstrap") as session:
            existing = session.exec(select(func.count()).select_from(User)).one()
            if existing:
                logger.info("Users table not empty, skipping seed", users=existing)
                return
            for user_in in SAMPLE_USERS:
                session.add(self._new_user(user_in))
            session.commit()
        logger.info("Seeded sample users", count=len(SAMPLE_USERS))

    def close(self) -> None:
        self.engine.dispose()

    @staticmethod
    def _first_user(session: Session, name: str) -> User | None:
        statement = (
            select(User).where(User.name == name).order_by(col(User.created_at))
        )
        return session.exec(statement).first()

    # Users

    def list_users(self) -> list[User]:
        def query(session: Session) -> list[User]:
            statement = select(User).order_by(col(User.created_at))
            return list(session.exec(statement).all())

        return self._run("list_users", query)

    def get_user(self, name: str) -> User | None:
        return self._run("get_user", lambda session: self._first_user(session, name))

    def create_user(self, user_in: UserCreate) -> User:
        user = self._new_user(user_in)
        with self._session("create_user") as session:
            session.add(user)
            session.commit()
            session.refresh(user)
        logger.info("User created", user_id=str(user.id), name=user.name)
        return user

    def delete_user(self, name: str) -> bool:
        with self._session("delete_user") as session:
            user = self._first_user(session, name)
            if not user:
                return False
            session.delete(user)
            session.commit()
        logger.info("User deleted", user_id=str(user.id), name=name)
        return True

    def update_user_tasks(self, name: str, tasks: list[str]) -> User | None:
        with self._session("update_user_tasks") as session:
            user = self._first_user(session, name)
            if not user:
                return None
            user.tasks = list(tasks)
            session.add(user)
            session.commit()
            session.refresh(user)
        logger.info("User tasks replaced", name=name, task_count=len(tasks))
        return user

    # Task logs

    def create_task_log(self, log_in: TaskLogCreate) -> TaskLog:
        log = self._new_task_log(log_in)
        with self._session("create_task_log") as session:
            session.add(log)
            session.commit()
            session.refresh(log)
        logger.info(
            "Task log created", log_id=str(log.id), user=log.user, status=log.status
        )
        return log

    def list_task_logs(self) -> list[TaskLog]:
        def query(session: Session) -> list[TaskLog]:
            statement = select(TaskLog).order_by(col(TaskLog.timestamp).desc())
            return list(session.exec(statement).all())

        return self._run("list_task_logs", query)

    def list_task_logs_by_user(self, user: str) -> list[TaskLog]:
        def query(session: Session) -> list[TaskLog]:
            statement = (
                select(TaskLog)
                .where(TaskLog.user == user)
                .order_by(col(TaskLog.timestamp).desc())
            )
            return list(session.exec(statement).all())

        return self._run("list_task_logs_by_user", query)

    def clear_task_logs(self) -> int:
        with self._session("clear_task_logs") as session:
            result = session.execute(delete(TaskLog))
            session.commit()
            removed = result.rowcount
        logger.info("Task logs cleared", removed=removed)
        return removed
