from io import BytesIO
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from stationdesk.main import create_app
from stationdesk.persistence.store import LocalStore, get_store


@pytest.fixture
def store(tmp_path: Path) -> LocalStore:
    return LocalStore(root=tmp_path)


@pytest.fixture
def api_client(store: LocalStore) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    return TestClient(app)


def _register(client: TestClient, station: str = "Embu", number: int | None = None, **quantities) -> dict:
    payload = {
        "station": station,
        "quantities": quantities or {"boxes": 1},
        "recorded_by": "Clerk",
        "brought_by": "Driver",
    }
    if number is not None:
        payload["number"] = number
    return client.post("/api/packages", json=payload)


def test_health_endpoints(api_client: TestClient) -> None:
    assert api_client.get("/api/health").json() == {"status": "ok"}
    payload = api_client.get("/api/health/store").json()
    assert payload["backend"] == "local"
    assert payload["packages_count"] == 0


def test_list_stations(api_client: TestClient) -> None:
    stations = api_client.get("/api/stations").json()
    assert [s["name"] for s in stations] == ["Embu", "Ugweri", "Meka", "Ena", "Gachuriri"]
    assert stations[0]["range_max"] == 300


def test_validate_code_endpoint(api_client: TestClient) -> None:
    ok = api_client.get("/api/stations/embu/validate", params={"number": 300}).json()
    bad = api_client.get("/api/stations/embu/validate", params={"number": 301}).json()

    assert ok["valid"] is True and ok["message"] is None
    assert bad["valid"] is False
    assert bad["message"] == "Code must be between 1 and 300 for Embu."
    assert api_client.get("/api/stations/nowhere/validate", params={"number": 1}).status_code == 404


def test_register_and_auto_suggestion(api_client: TestClient) -> None:
    assert api_client.get("/api/stations/Embu/next").json()["next_free"] == 1

    first = _register(api_client)
    assert first.status_code == 201
    assert first.json()["tracking_number"] == "Embu-1"
    assert first.json()["quantities"] == {"boxes": 1, "basins": 0, "small_sacks": 0}

    assert _register(api_client, number=3).json()["tracking_number"] == "Embu-3"
    assert api_client.get("/api/stations/Embu/next").json()["next_free"] == 2


def test_register_error_statuses(api_client: TestClient) -> None:
    assert _register(api_client, number=301).status_code == 422
    assert _register(api_client, station="Nowhere").status_code == 404
    assert _register(api_client, boxes=0).status_code == 422

    assert _register(api_client, number=7).status_code == 201
    duplicate = _register(api_client, number=7)
    assert duplicate.status_code == 409
    assert "Embu-7" in duplicate.json()["detail"]


def test_register_full_station_returns_full(api_client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    from stationdesk.services.registration import service as registration_service

    monkeypatch.setattr(registration_service, "next_free_number", lambda station, issued: None)
    response = _register(api_client)
    assert response.status_code == 409
    assert response.json()["detail"] == "Full"


def test_list_lookup_and_parse(api_client: TestClient) -> None:
    _register(api_client, boxes=2)
    _register(api_client, station="Meka", basins=1)

    listing = api_client.get("/api/packages", params={"station": "Meka"}).json()
    assert [p["tracking_number"] for p in listing["items"]] == ["Meka-601"]
    assert listing["totals"]["basins"] == 1

    assert api_client.get("/api/packages/Embu-1").json()["quantities"]["boxes"] == 2
    assert api_client.get("/api/packages/Embu-99").status_code == 404

    assert api_client.get("/api/packages/parse/Ugweri-301").json() == {"station": "Ugweri", "number": 301}
    assert api_client.get("/api/packages/parse/Ugweri-abc").status_code == 422


def test_exports(api_client: TestClient) -> None:
    _register(api_client, boxes=2)

    csv_response = api_client.get("/api/packages/export")
    assert csv_response.headers["content-type"].startswith("text/csv")
    assert '"Embu-1"' in csv_response.text

    xlsx_response = api_client.get("/api/packages/export", params={"fmt": "xlsx"})
    sheet = load_workbook(BytesIO(xlsx_response.content)).active
    assert sheet.cell(row=2, column=2).value == "Embu-1"

    station_csv = api_client.get("/api/stations/Embu/export")
    assert 'filename="Embu-packages.csv"' in station_csv.headers["content-disposition"]


def test_reports_count_duplicates_from_store(api_client: TestClient, store: LocalStore) -> None:
    store.storage.write_json(
        "packages",
        [
            {"id": "1", "trackingnumber": "Embu-1", "station": "Embu", "registeredat": "2024-01-20"},
            {"id": "2", "trackingnumber": "Embu-1", "station": "Embu", "registeredat": "2024-01-20"},
            {"id": "3", "trackingnumber": "Ugweri-301", "station": "Ugweri", "registeredat": "2024-01-20"},
            {"id": "4", "trackingnumber": "bad code", "station": "Embu", "registeredat": "2024-01-20"},
        ],
    )

    payload = api_client.get("/api/reports/stations").json()

    assert payload["counts"] == {"Embu": 2, "Ugweri": 1}
    assert payload["totals"]["count"] == 4

    summary = {item["station"]: item for item in api_client.get("/api/stations/summary").json()}
    assert summary["Embu"]["next_free"] == 2
    assert summary["Embu"]["totals"]["count"] == 3


def test_area_code_endpoints(api_client: TestClient) -> None:
    created = api_client.post(
        "/api/area-codes",
        json={"code": "AC001", "name": "CBD", "region": "Nairobi", "min_range": 1, "max_range": 50},
    )
    assert created.status_code == 201
    area_code_id = created.json()["id"]

    _register(api_client)
    listing = api_client.get("/api/area-codes").json()
    assert listing[0]["package_count"] == 1

    assert api_client.post(f"/api/area-codes/{area_code_id}/toggle").json()["status"] == "inactive"
    assigned = api_client.post(f"/api/area-codes/{area_code_id}/assign", json={"user_id": "u1"}).json()
    assert assigned["assigned_to"] == "u1"

    bad_update = api_client.put(f"/api/area-codes/{area_code_id}", json={"min_range": 99})
    assert bad_update.status_code == 422

    export = api_client.get("/api/area-codes/export")
    assert '"AC001"' in export.text

    assert api_client.delete(f"/api/area-codes/{area_code_id}").status_code == 204
    assert api_client.delete(f"/api/area-codes/{area_code_id}").status_code == 404
    assert api_client.get("/api/area-codes").json() == []


def test_list_skips_rows_with_unknown_status(api_client: TestClient, store: LocalStore) -> None:
    _register(api_client)
    rows = store.storage.read_json("packages", [])
    store.storage.write_json("packages", [*rows, {**rows[0], "id": "x", "trackingnumber": "Embu-2", "status": "pending"}])

    response = api_client.get("/api/packages")

    assert response.status_code == 200
    assert [p["tracking_number"] for p in response.json()["items"]] == ["Embu-1"]
    assert response.json()["totals"]["count"] == 1


def test_register_on_corrupt_slot_returns_bad_gateway(api_client: TestClient, store: LocalStore) -> None:
    slot = store.storage.slot_path("packages")
    slot.write_text('[{"id": "1", "trackingnumber": "Embu-1"', encoding="utf-8")

    response = _register(api_client)

    assert response.status_code == 502
    assert slot.read_text(encoding="utf-8") == '[{"id": "1", "trackingnumber": "Embu-1"'


def test_area_code_update_null_clears_notes_only(api_client: TestClient) -> None:
    created = api_client.post(
        "/api/area-codes",
        json={"code": "AC001", "name": "CBD", "region": "Nairobi", "min_range": 1, "max_range": 50, "notes": "gate B"},
    ).json()
    assert created["notes"] == "gate B"

    response = api_client.put(f"/api/area-codes/{created['id']}", json={"notes": None, "name": None})

    assert response.status_code == 200
    assert response.json()["notes"] is None
    assert response.json()["name"] == "CBD"
