"""
SQLModel definitions for users and task logs.

The table classes are shared by both storage backends, so the in-memory and
relational variants hand the route layer identical records. The non-table
classes are request payloads and response shapes.
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Current UTC time without tzinfo, as stored in the plain DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TaskStatus(str, Enum):
    COMPLETED = "COMPLETED"
    NOT_COMPLETED = "NOT COMPLETED"


# Users
class UserBase(SQLModel):
    name: str = Field(min_length=1, max_length=255, index=True)
    project: str = Field(min_length=1, max_length=255)


class User(UserBase, table=True):
    """User table definition."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tasks: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    # Keeps name lookups resolving to the earliest user when names collide.
    created_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime, index=True
    )


class UserCreate(UserBase):
    tasks: list[str] | None = None


class UserTasksUpdate(SQLModel):
    tasks: list[str]


class UserPublic(UserBase):
    id: UUID
    tasks: list[str]


class UserTasks(SQLModel):
    tasks: list[str]


# Task logs
class TaskLogBase(SQLModel):
    user: str = Field(min_length=1, max_length=255, index=True)
    task: str = Field(min_length=1)
    status: TaskStatus = Field(default=TaskStatus.COMPLETED)
    comment: str | None = None


class TaskLog(TaskLogBase, table=True):
    """Task log table definition."""

    __tablename__ = "task_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    timestamp: datetime = Field(
        default_factory=utcnow, sa_type=DateTime, index=True
    )


class TaskLogCreate(SQLModel):
    user: str = Field(min_length=1, max_length=255)
    task: str = Field(min_length=1)
    status: TaskStatus | None = None
    comment: str | None = None


class TaskLogPublic(TaskLogBase):
    id: UUID
    timestamp: datetime


# Generic message
class Message(SQLModel):
    detail: str
