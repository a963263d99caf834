from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from app.repositories.resource_planning_repository import ResourcePlanningRepository

API = "/api/v1"


def _create_project(client: TestClient, **overrides: object) -> dict:
    payload: dict[str, object] = {
        "name": "Apollo",
        "exchange_rate": 1.0,
        "default_margin": 25,
        "week_count": 4,
    }
    payload.update(overrides)
    response = client.post(f"{API}/projects", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def _create_plan(client: TestClient, project_id: str, allocations: dict[int, object], **fields: object) -> dict:
    payload: dict[str, object] = {
        "role": "Developer",
        "int_hourly_rate": 25,
        "client_hourly_rate": 40,
        "weekly_allocations": [{"week_number": week, "allocation": value} for week, value in allocations.items()],
    }
    payload.update(fields)
    response = client.post(f"{API}/projects/{project_id}/resource-plans", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def _schedule(plan: dict) -> dict[int, int]:
    return {row["week_number"]: row["allocation"] for row in plan["weekly_allocations"]}


def test_create_plan_clamps_and_densifies_allocations(client: TestClient) -> None:
    project = _create_project(client)

    plan = _create_plan(client, project["id"], {1: 150, 2: "abc", 3: 33.7, 9: 50})

    assert _schedule(plan) == {1: 100, 2: 0, 3: 33, 4: 0}
    listed = client.get(f"{API}/projects/{project['id']}/resource-plans").json()["items"]
    assert [_schedule(row) for row in listed] == [{1: 100, 2: 0, 3: 33, 4: 0}]


def test_plans_keep_creation_order(client: TestClient) -> None:
    project = _create_project(client)
    first = _create_plan(client, project["id"], {}, role="Zed")
    second = _create_plan(client, project["id"], {}, role="Amy")

    listed = client.get(f"{API}/projects/{project['id']}/resource-plans").json()["items"]

    assert [row["id"] for row in listed] == [first["id"], second["id"]]


def test_update_plan_fields_and_schedule(client: TestClient) -> None:
    project = _create_project(client)
    plan = _create_plan(client, project["id"], {1: 20, 2: 20, 3: 20, 4: 20})

    response = client.patch(
        f"{API}/resource-plans/{plan['id']}",
        json={
            "name": "Alice",
            "client_hourly_rate": 55,
            "weekly_allocations": [{"week_number": 2, "allocation": 80}],
        },
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["name"] == "Alice"
    assert body["role"] == "Developer"
    assert body["client_hourly_rate"] == 55
    assert _schedule(body) == {1: 0, 2: 80, 3: 0, 4: 0}

    untouched = client.put(f"{API}/resource-plans/{plan['id']}", json={"client_role": "Engineer"}).json()
    assert _schedule(untouched) == {1: 0, 2: 80, 3: 0, 4: 0}
    assert untouched["client_role"] == "Engineer"


@pytest.mark.parametrize("role", ["", "   "])
def test_update_plan_rejects_empty_role(client: TestClient, role: str) -> None:
    project = _create_project(client)
    plan = _create_plan(client, project["id"], {1: 50})

    response = client.patch(f"{API}/resource-plans/{plan['id']}", json={"role": role})

    assert response.status_code == 400
    assert response.json()["detail"] == "Role is required and cannot be empty."
    assert client.get(f"{API}/resource-plans/{plan['id']}").json()["role"] == "Developer"


def test_assign_role_prices_from_default_margin(client: TestClient) -> None:
    project = _create_project(client)
    entry = client.post(
        f"{API}/projects/{project['id']}/resource-lists",
        json={"role": "Architect", "client_role": "Solution Architect", "name": "Dana", "int_rate": 50},
    ).json()
    plan = _create_plan(client, project["id"], {1: 100}, role="", int_hourly_rate=0, client_hourly_rate=0)

    response = client.post(f"{API}/resource-plans/{plan['id']}/assign-role", json={"resource_list_id": entry["id"]})

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["role"] == "Architect"
    assert body["client_role"] == "Solution Architect"
    assert body["name"] == "Dana"
    assert body["int_hourly_rate"] == 50
    assert body["client_hourly_rate"] == pytest.approx(66.67, abs=0.01)
    assert _schedule(body)[1] == 100

    summary = client.get(f"{API}/projects/{project['id']}/resource-plan-summary").json()
    assert summary["resource_plans"][0]["margin_percent"] == pytest.approx(25.0)


def test_assign_role_converts_with_exchange_rate(client: TestClient) -> None:
    project = _create_project(client, exchange_rate=0.9, default_margin=10)
    entry = client.post(
        f"{API}/projects/{project['id']}/resource-lists",
        json={"role": "QA", "int_rate": 45},
    ).json()
    plan = _create_plan(client, project["id"], {})

    body = client.post(
        f"{API}/resource-plans/{plan['id']}/assign-role",
        json={"resource_list_id": entry["id"]},
    ).json()

    assert body["client_hourly_rate"] == pytest.approx(45 / 0.9 * 0.9)


def test_assign_role_rejects_entry_of_another_project(client: TestClient) -> None:
    project = _create_project(client)
    other = _create_project(client, name="Other")
    entry = client.post(f"{API}/projects/{other['id']}/resource-lists", json={"role": "QA", "int_rate": 20}).json()
    plan = _create_plan(client, project["id"], {})

    response = client.post(f"{API}/resource-plans/{plan['id']}/assign-role", json={"resource_list_id": entry["id"]})

    assert response.status_code == 422


def test_set_single_week_allocation(client: TestClient) -> None:
    project = _create_project(client)
    plan = _create_plan(client, project["id"], {1: 10})
    base = f"{API}/resource-plans/{plan['id']}/weekly-allocations"

    response = client.put(f"{base}/3", json={"allocation": 120})
    assert response.status_code == 200
    assert response.json() == {"week_number": 3, "allocation": 100}

    assert client.put(f"{base}/2", json={"allocation": "-4"}).json()["allocation"] == 0
    assert client.put(f"{base}/5", json={"allocation": 10}).status_code == 404
    assert client.put(f"{base}/0", json={"allocation": 10}).status_code == 404

    rows = client.get(base).json()["items"]
    assert rows == [
        {"week_number": 1, "allocation": 10},
        {"week_number": 2, "allocation": 0},
        {"week_number": 3, "allocation": 100},
        {"week_number": 4, "allocation": 0},
    ]


def test_delete_plan_removes_its_allocations(client: TestClient) -> None:
    project = _create_project(client)
    plan = _create_plan(client, project["id"], {1: 10, 2: 20})

    assert client.delete(f"{API}/resource-plans/{plan['id']}").status_code == 204
    assert client.get(f"{API}/resource-plans/{plan['id']}").status_code == 404
    assert client.get(f"{API}/resource-plans/{plan['id']}/weekly-allocations").status_code == 404
    assert client.get(f"{API}/projects/{project['id']}/resource-plans").json()["items"] == []


def test_schedule_write_conflict_rolls_back_plan_update(
    client: TestClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    project = _create_project(client)
    plan = _create_plan(client, project["id"], {1: 10, 2: 20})

    def conflicting_write(self: ResourcePlanningRepository, resource_plan_id: object, schedule: object) -> None:
        raise IntegrityError("UPDATE weekly_allocations", {}, Exception("constraint failed"))

    monkeypatch.setattr(ResourcePlanningRepository, "replace_schedule", conflicting_write)

    response = client.patch(
        f"{API}/resource-plans/{plan['id']}",
        json={"name": "Alice", "weekly_allocations": [{"week_number": 1, "allocation": 90}]},
    )

    assert response.status_code == 409
    stored = client.get(f"{API}/resource-plans/{plan['id']}").json()
    assert stored["name"] is None
    assert _schedule(stored) == {1: 10, 2: 20, 3: 0, 4: 0}
