from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from taskboard.core.db import build_engine
from taskboard.main import create_app
from taskboard.storage import MemoryStorage, SQLStorage, Storage
from taskboard.tests.utils.mock_storage import TickingClock


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def memory_storage(clock: TickingClock) -> MemoryStorage:
    return MemoryStorage(clock=clock)


@pytest.fixture
def sql_storage(clock: TickingClock) -> Generator[SQLStorage, None, None]:
    """SQL storage over a private in-memory SQLite database."""
    storage = SQLStorage(build_engine("sqlite://"), clock=clock)
    storage.bootstrap()
    yield storage
    storage.close()


@pytest.fixture(params=["memory", "sql"])
def storage(request: pytest.FixtureRequest) -> Storage:
    """Each storage backend in turn, seeded with the sample users."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def client(storage: Storage) -> Generator[TestClient, None, None]:
    with TestClient(create_app(storage=storage)) as c:
        yield c
