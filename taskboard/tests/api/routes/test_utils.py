from fastapi.testclient import TestClient

from taskboard.core.config import settings
from taskboard.main import create_app
from taskboard.tests.utils.mock_storage import FailingStorage


def test_health_check(client: TestClient) -> None:
    r = client.get(f"{settings.API_STR}/utils/health-check/")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "healthy"
    assert body["storage_backend"] in {"memory", "sql"}
    assert body["user_count"] == 3


def test_health_check_storage_down() -> None:
    with TestClient(create_app(storage=FailingStorage())) as client:
        r = client.get(f"{settings.API_STR}/utils/health-check/")
    assert r.status_code == 503
    detail = r.json()["detail"]
    assert detail["status"] == "unhealthy"
    assert detail["storage_backend"] == "failing"
