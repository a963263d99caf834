from __future__ import annotations

import io

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

API = "/api/v1"


def _create_project(client: TestClient, **overrides: object) -> dict:
    payload: dict[str, object] = {
        "name": "Apollo",
        "client_currency": "GBP",
        "exchange_rate": 0.8,
        "default_margin": 30,
        "week_count": 5,
    }
    payload.update(overrides)
    response = client.post(f"{API}/projects", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_default_project_is_created_on_startup(client: TestClient) -> None:
    response = client.get(f"{API}/projects/default")

    assert response.status_code == 200
    project = response.json()
    assert project["name"] == "Default Project"
    assert project["client_currency"] == "EUR"
    assert project["currency_symbol"] == "€"
    assert project["default_margin"] == 25
    assert project["weeks"] == list(range(1, 9))

    listed = client.get(f"{API}/projects").json()["items"]
    assert [row["id"] for row in listed] == [project["id"]]


def test_project_create_update_and_detail(client: TestClient) -> None:
    project = _create_project(client)
    assert project["weeks"] == [1, 2, 3, 4, 5]
    assert project["currency_symbol"] == "£"

    updated = client.patch(
        f"{API}/projects/{project['id']}",
        json={"exchange_rate": 0.75, "default_margin": 20, "client_currency": "USD", "days_in_fte": 21},
    )
    assert updated.status_code == 200
    body = updated.json()
    assert body["exchange_rate"] == 0.75
    assert body["default_margin"] == 20
    assert body["currency_symbol"] == "$"
    assert body["days_in_fte"] == 21

    detail = client.get(f"{API}/projects/{project['id']}").json()
    assert detail["rate_cards"] == []
    assert detail["resource_lists"] == []
    assert detail["resource_plans"] == []


def test_project_validation(client: TestClient) -> None:
    project = _create_project(client)

    assert client.patch(f"{API}/projects/{project['id']}", json={"default_margin": 100}).status_code == 422
    assert client.patch(f"{API}/projects/{project['id']}", json={"exchange_rate": 0}).status_code == 422
    assert client.post(f"{API}/projects", json={"name": "x", "week_count": 0}).status_code == 422
    assert client.get(f"{API}/projects/00000000-0000-0000-0000-000000000000").status_code == 404


def test_rate_card_crud_and_bulk(client: TestClient) -> None:
    project = _create_project(client)
    base = f"{API}/projects/{project['id']}/rate-cards"

    created = client.post(base, json={"role": "Backend Developer", "ukraine": 30, "london": 90})
    assert created.status_code == 201
    card = created.json()
    assert card["naming_in_pm"] == "Backend Developer"
    assert card["discipline"] == "General"
    assert card["ukraine"] == 30
    assert card["india"] == 0

    bulk = client.post(
        f"{base}/bulk",
        json=[
            {"role": "QA Engineer", "discipline": "Quality", "eastern_europe": 28},
            {"role": "Designer", "discipline": "Design", "latam": 35},
        ],
    )
    assert bulk.status_code == 201
    assert bulk.json()["count"] == 2

    roles = [row["role"] for row in client.get(base).json()["items"]]
    assert roles == ["Designer", "Backend Developer", "QA Engineer"]

    updated = client.put(f"{API}/rate-cards/{card['id']}", json={"ukraine": 32.5, "description": "core team"})
    assert updated.status_code == 200
    assert updated.json()["ukraine"] == 32.5
    assert updated.json()["london"] == 90

    assert client.patch(f"{API}/rate-cards/{card['id']}", json={"role": "  "}).status_code == 422
    assert client.post(base, json={"role": "Dev", "ukraine": -1}).status_code == 422

    assert client.delete(f"{API}/rate-cards/{card['id']}").status_code == 204
    assert client.delete(f"{API}/rate-cards/{card['id']}").status_code == 404

    cleared = client.delete(base)
    assert cleared.status_code == 200
    assert cleared.json()["count"] == 2
    assert client.get(base).json()["items"] == []


def test_rate_card_csv_import(client: TestClient) -> None:
    project = _create_project(client)
    content = (
        "Role,Naming in PM,Discipline,Ukraine,Eastern Europe,New York,Unknown\n"
        "Developer,Dev,Engineering,30,35.5,120,ignored\n"
        ",,Engineering,1,1,1,\n"
        "Analyst,,Business,n/a,,80,\n"
    ).encode("utf-8")

    response = client.post(
        f"{API}/projects/{project['id']}/rate-cards/import",
        files={"file": ("rates.csv", content, "text/csv")},
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["count"] == 2
    by_role = {row["role"]: row for row in body["items"]}
    assert by_role["Developer"]["eastern_europe"] == 35.5
    assert by_role["Developer"]["new_york"] == 120
    assert by_role["Developer"]["naming_in_pm"] == "Dev"
    assert by_role["Analyst"]["ukraine"] == 0
    assert by_role["Analyst"]["naming_in_pm"] == "Analyst"


def test_rate_card_xlsx_import(client: TestClient) -> None:
    project = _create_project(client)
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["Role", "Discipline", "India", "London"])
    sheet.append(["Architect", "Engineering", 40, 150])
    output = io.BytesIO()
    workbook.save(output)

    response = client.post(
        f"{API}/projects/{project['id']}/rate-cards/import",
        files={"file": ("rates.xlsx", output.getvalue(), "application/octet-stream")},
    )

    assert response.status_code == 201, response.text
    item = response.json()["items"][0]
    assert item["role"] == "Architect"
    assert item["india"] == 40
    assert item["london"] == 150


def test_rate_card_import_rejects_bad_files(client: TestClient) -> None:
    project = _create_project(client)
    url = f"{API}/projects/{project['id']}/rate-cards/import"

    wrong_type = client.post(url, files={"file": ("rates.txt", b"Role\nDev\n", "text/plain")})
    assert wrong_type.status_code == 422

    no_role = client.post(url, files={"file": ("rates.csv", b"Name,Ukraine\nx,1\n", "text/csv")})
    assert no_role.status_code == 422

    empty = client.post(url, files={"file": ("rates.csv", b"Role,Ukraine\n,1\n", "text/csv")})
    assert empty.status_code == 422

    not_utf8 = client.post(url, files={"file": ("rates.csv", b"Role\n\xff\xfe\x00bad\n", "text/csv")})
    assert not_utf8.status_code == 422

    corrupt_xlsx = client.post(url, files={"file": ("rates.xlsx", b"not a zip", "application/octet-stream")})
    assert corrupt_xlsx.status_code == 422

    assert client.get(f"{API}/projects/{project['id']}/rate-cards").json()["items"] == []


@pytest.mark.parametrize("cell", ["nan", "inf", "-5"])
def test_rate_card_import_rejects_invalid_rates(client: TestClient, cell: str) -> None:
    project = _create_project(client)
    content = f"Role,Ukraine,London\nDeveloper,30,40\nAnalyst,{cell},50\n".encode("utf-8")

    response = client.post(
        f"{API}/projects/{project['id']}/rate-cards/import",
        files={"file": ("rates.csv", content, "text/csv")},
    )

    assert response.status_code == 422
    assert response.json()["detail"].startswith("Row 3:")
    assert client.get(f"{API}/projects/{project['id']}/rate-cards").json()["items"] == []


def test_resource_list_from_rate_card(client: TestClient) -> None:
    project = _create_project(client)
    card = client.post(
        f"{API}/projects/{project['id']}/rate-cards",
        json={"role": "Developer", "naming_in_pm": "Software Engineer", "new_york": 110},
    ).json()

    response = client.post(
        f"{API}/projects/{project['id']}/resource-lists/from-rate-card",
        json={"rate_card_id": card["id"], "region": "new_york", "name": "Alice"},
    )

    assert response.status_code == 201, response.text
    entry = response.json()
    assert entry["role"] == "Developer"
    assert entry["client_role"] == "Software Engineer"
    assert entry["int_rate"] == 110
    assert entry["location"] == "new_york"
    assert entry["name"] == "Alice"

    other = _create_project(client, name="Other")
    foreign = client.post(
        f"{API}/projects/{other['id']}/resource-lists/from-rate-card",
        json={"rate_card_id": card["id"], "region": "new_york"},
    )
    assert foreign.status_code == 422

    bad_region = client.post(
        f"{API}/projects/{project['id']}/resource-lists/from-rate-card",
        json={"rate_card_id": card["id"], "region": "mars"},
    )
    assert bad_region.status_code == 422


def test_resource_list_crud(client: TestClient) -> None:
    project = _create_project(client)
    base = f"{API}/projects/{project['id']}/resource-lists"

    created = client.post(base, json={"role": "QA", "int_rate": 25, "location": " Kyiv "})
    assert created.status_code == 201
    entry = created.json()
    assert entry["location"] == "Kyiv"

    updated = client.patch(f"{API}/resource-lists/{entry['id']}", json={"int_rate": 27.5, "name": "Bob"})
    assert updated.status_code == 200
    assert updated.json()["int_rate"] == 27.5
    assert updated.json()["name"] == "Bob"

    assert client.post(base, json={"role": "QA", "int_rate": -1}).status_code == 422
    assert [row["id"] for row in client.get(base).json()["items"]] == [entry["id"]]

    assert client.delete(f"{API}/resource-lists/{entry['id']}").status_code == 204
    assert client.get(base).json()["items"] == []
