from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from taskboard.core.config import Settings

# make sure all SQLModel models are imported (taskboard.models) before
# creating tables, otherwise the metadata is empty
from taskboard import models  # noqa: F401


def build_engine(database_uri: str, echo: bool = False) -> Engine:
    """Create an engine for the given URI with pool settings suited to it."""
    engine_kwargs: dict[str, Any] = {"echo": echo}

    if database_uri.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_uri or database_uri in ("sqlite://", "sqlite:///"):
            # One shared connection, or every checkout would see a fresh database
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs.update(
            {
                "pool_pre_ping": True,  # Verify connections before use
                "pool_recycle": 3600,  # Recycle connections every hour
                "pool_size": 10,
                "max_overflow": 20,
            }
        )

    return create_engine(database_uri, **engine_kwargs)


def engine_from_settings(settings: Settings) -> Engine:
    if not settings.SQLALCHEMY_DATABASE_URI:
        raise RuntimeError("DATABASE_URL is not configured")
    return build_engine(settings.SQLALCHEMY_DATABASE_URI, echo=settings.DATABASE_ECHO)


def create_tables(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


def drop_tables(engine: Engine) -> None:
    SQLModel.metadata.drop_all(engine)
