"""
Application Tests

End-to-end flow through the REST API, error status mapping and the
request middleware.
"""

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from taskboard.core.config import settings
from taskboard.main import UNMATCHED_ENDPOINT, create_app
from taskboard.tests.utils.mock_storage import FailingStorage

API = settings.API_STR


def test_end_to_end_user_lifecycle(client: TestClient) -> None:
    r = client.post(f"{API}/users", json={"name": "Ann", "project": "X"})
    assert r.status_code == 201
    assert r.json()["id"]
    assert r.json()["tasks"] == []

    r = client.post(f"{API}/tasks/Ann", json={"tasks": ["A", "B"]})
    assert r.status_code == 200
    assert r.json()["tasks"] == ["A", "B"]

    r = client.post(f"{API}/logs", json={"user": "Ann", "task": "A"})
    assert r.status_code == 201
    log = r.json()
    assert log["status"] == "COMPLETED"

    r = client.get(f"{API}/logs", params={"user": "Ann"})
    assert r.status_code == 200
    assert r.json() == [log]

    r = client.delete(f"{API}/users/Ann")
    assert r.status_code == 200

    r = client.get(f"{API}/tasks/Ann")
    assert r.status_code == 404

    # logs outlive their user
    assert client.get(f"{API}/logs", params={"user": "Ann"}).json() == [log]


class TestStorageFailures:
    """Test storage errors map to generic 500 responses."""

    @pytest.fixture
    def failing_client(self):
        with TestClient(create_app(storage=FailingStorage())) as c:
            yield c

    @pytest.mark.parametrize(
        "method,path,body,message",
        [
            ("GET", "/users", None, "Failed to fetch users"),
            ("POST", "/users", {"name": "Ann", "project": "X"}, "Failed to create user"),
            ("DELETE", "/users/Ann", None, "Failed to delete user"),
            ("GET", "/tasks/Ann", None, "Failed to fetch tasks"),
            ("POST", "/tasks/Ann", {"tasks": ["A"]}, "Failed to update tasks"),
            ("POST", "/logs", {"user": "Ann", "task": "A"}, "Failed to create task log"),
            ("GET", "/logs", None, "Failed to fetch task logs"),
            ("GET", "/logs?user=Ann", None, "Failed to fetch task logs"),
            ("DELETE", "/logs", None, "Failed to clear task logs"),
        ],
    )
    def test_fixed_message_without_internal_detail(
        self, failing_client: TestClient, method, path, body, message
    ):
        r = failing_client.request(method, f"{API}{path}", json=body)

        assert r.status_code == 500
        assert r.json() == {"detail": message}
        assert "connection refused" not in r.text

    def test_validation_runs_before_storage(self, failing_client: TestClient):
        r = failing_client.post(f"{API}/users", json={"name": "Ann"})
        assert r.status_code == 400

    def test_view_storage_error_is_generic_500(self, failing_client: TestClient):
        r = failing_client.get("/")
        assert r.status_code == 500
        assert r.json() == {"detail": "Internal server error"}


class TestMiddleware:
    """Test correlation ids and metrics exposure."""

    def test_correlation_id_generated(self, client: TestClient):
        r = client.get(f"{API}/users")
        assert r.headers["X-Correlation-ID"]

    def test_correlation_id_propagated(self, client: TestClient):
        r = client.get(f"{API}/users", headers={"X-Correlation-ID": "abc-123"})
        assert r.headers["X-Correlation-ID"] == "abc-123"

    def test_metrics_exposed(self, client: TestClient):
        client.get(f"{API}/users")

        r = client.get("/metrics/")
        assert r.status_code == 200
        assert "taskboard_http_requests_total" in r.text
        assert "taskboard_storage_operations_total" in r.text

    def test_metrics_label_route_template_not_raw_path(self, client: TestClient):
        endpoint = f"{API}/tasks/{{user:path}}"
        labels = {"method": "GET", "endpoint": endpoint, "status": "404"}
        before = REGISTRY.get_sample_value("taskboard_http_requests_total", labels) or 0

        for i in range(5):
            assert client.get(f"{API}/tasks/nobody-{i}").status_code == 404

        after = REGISTRY.get_sample_value("taskboard_http_requests_total", labels)
        assert after == before + 5
        raw = {"method": "GET", "endpoint": f"{API}/tasks/nobody-0", "status": "404"}
        assert REGISTRY.get_sample_value("taskboard_http_requests_total", raw) is None

    def test_unrouted_paths_share_one_label(self, client: TestClient):
        labels = {"method": "GET", "endpoint": UNMATCHED_ENDPOINT, "status": "404"}
        before = REGISTRY.get_sample_value("taskboard_http_requests_total", labels) or 0

        client.get("/no/such/page-1")
        client.get("/no/such/page-2")

        after = REGISTRY.get_sample_value("taskboard_http_requests_total", labels)
        assert after == before + 2
