from fastapi.testclient import TestClient

from taskboard.core.config import settings


def test_get_user_tasks(client: TestClient) -> None:
    r = client.get(f"{settings.API_STR}/tasks/Mike%20Johnson")
    assert r.status_code == 200
    assert r.json() == {
        "tasks": [
            "Data Visualization",
            "Performance Optimization",
            "User Interface Design",
        ]
    }


def test_get_user_tasks_not_found(client: TestClient) -> None:
    r = client.get(f"{settings.API_STR}/tasks/Nobody")
    assert r.status_code == 404
    assert r.json() == {"detail": "User not found"}


def test_update_user_tasks_replaces(client: TestClient) -> None:
    r = client.post(
        f"{settings.API_STR}/tasks/John%20Doe", json={"tasks": ["Launch Review"]}
    )
    assert r.status_code == 200
    updated = r.json()
    assert updated["name"] == "John Doe"
    assert updated["tasks"] == ["Launch Review"]

    r = client.get(f"{settings.API_STR}/tasks/John%20Doe")
    assert r.json() == {"tasks": ["Launch Review"]}


def test_update_user_tasks_not_array(client: TestClient) -> None:
    r = client.post(f"{settings.API_STR}/tasks/John%20Doe", json={"tasks": "A,B"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Tasks must be an array"


def test_update_user_tasks_missing_field(client: TestClient) -> None:
    r = client.post(f"{settings.API_STR}/tasks/John%20Doe", json={})
    assert r.status_code == 400
    assert r.json()["detail"] == "Tasks must be an array"


def test_update_user_tasks_validates_before_lookup(client: TestClient) -> None:
    r = client.post(f"{settings.API_STR}/tasks/Nobody", json={"tasks": 3})
    assert r.status_code == 400


def test_update_user_tasks_not_found(client: TestClient) -> None:
    r = client.post(f"{settings.API_STR}/tasks/Nobody", json={"tasks": ["A"]})
    assert r.status_code == 404
