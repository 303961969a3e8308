import re
import threading

import pytest
from sqlalchemy.orm import sessionmaker

from bigeo.Controller.deps import get_store
from bigeo.DB.base import Base
from bigeo.DB.session import build_engine
from bigeo.main import app
from bigeo.Repositories import shipment as shipment_repo
from bigeo.Services import identifiers
from bigeo.Services.shipment_store import SqlShipmentStore


CREATED_AT = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")


def create(client, payload):
    resp = client.post("/api/shipments", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_root_greeting(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "Welcome to the BiGeo Backend!"


def test_health_reports_database(client):
    assert client.get("/health").json() == {"status": "ok", "database": "connected"}


def test_list_empty(client):
    resp = client.get("/api/shipments")
    assert resp.status_code == 200
    assert resp.json() == []


def test_create_returns_record_with_id_and_created_at(client, shipment_payload):
    body = create(client, shipment_payload)
    for key, value in shipment_payload.items():
        assert body[key] == value
    assert isinstance(body["id"], int)
    assert body["notes"] is None
    assert CREATED_AT.match(body["created_at"])


def test_create_keeps_caller_created_at(client, shipment_payload):
    body = create(client, dict(shipment_payload, created_at="2024-02-03 04:05:06"))
    assert body["created_at"] == "2024-02-03 04:05:06"


def test_duplicate_create_is_a_conflict(client, shipment_payload):
    create(client, shipment_payload)
    resp = client.post("/api/shipments", json=shipment_payload)
    assert resp.status_code == 409
    assert resp.json() == {"error": "Shipment with this device_id or shipment_id already exists"}
    assert len(client.get("/api/shipments").json()) == 1


def test_duplicate_device_id_alone_is_a_conflict(client, shipment_payload):
    create(client, shipment_payload)
    resp = client.post("/api/shipments", json=dict(shipment_payload, shipment_id="SHIP-002"))
    assert resp.status_code == 409


def test_duplicate_shipment_id_alone_is_a_conflict(client, shipment_payload):
    create(client, shipment_payload)
    resp = client.post("/api/shipments", json=dict(shipment_payload, device_id="iot-002"))
    assert resp.status_code == 409


def test_create_generates_identifiers_when_both_omitted(client, shipment_payload):
    del shipment_payload["device_id"], shipment_payload["shipment_id"]
    body = create(client, shipment_payload)
    assert re.fullmatch(r"iot-\d{5}", body["device_id"])
    assert body["shipment_id"] == "SHIP-" + body["device_id"][4:]


def test_generated_identifier_collision_is_a_conflict(client, shipment_payload, monkeypatch):
    monkeypatch.setattr(identifiers, "draw_identifier_number", lambda rng=None: 7)
    del shipment_payload["device_id"], shipment_payload["shipment_id"]

    assert create(client, shipment_payload)["device_id"] == "iot-00007"
    resp = client.post("/api/shipments", json=shipment_payload)
    assert resp.status_code == 409


def test_create_with_only_one_identifier_is_rejected(client, shipment_payload):
    del shipment_payload["shipment_id"]
    resp = client.post("/api/shipments", json=shipment_payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields"}
    assert client.get("/api/shipments").json() == []


def test_create_with_empty_required_field_is_rejected(client, shipment_payload):
    resp = client.post("/api/shipments", json=dict(shipment_payload, status=""))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields"}


def test_create_without_body_is_rejected(client):
    resp = client.post("/api/shipments")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields"}


def test_create_with_malformed_json_is_rejected(client):
    resp = client.post("/api/shipments", content=b"{not json",
                       headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request body"}


def test_create_with_wrong_field_type_is_rejected(client, shipment_payload):
    resp = client.post("/api/shipments", json=dict(shipment_payload, status=5))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request body"}


def test_get_after_create_round_trips(client, shipment_payload):
    created = create(client, dict(shipment_payload, notes="Handle with care"))
    resp = client.get(f"/api/shipments/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == created


def test_get_unknown_id(client):
    resp = client.get("/api/shipments/999999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Shipment not found"}


def test_get_non_numeric_id(client):
    resp = client.get("/api/shipments/abc")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Shipment not found"}


def test_list_is_ordered_by_id(client, shipment_payload):
    ids = []
    for n in range(3):
        body = create(client, dict(shipment_payload, device_id=f"iot-10{n}", shipment_id=f"SHIP-10{n}"))
        ids.append(body["id"])
    listed = client.get("/api/shipments").json()
    assert [s["id"] for s in listed] == sorted(ids)


def test_update_replaces_fields_and_preserves_identity(client, shipment_payload):
    created = create(client, dict(shipment_payload, notes="old note"))
    update = dict(shipment_payload, status="In Transit", current_location="Hub C",
                  id=12345, created_at="1999-01-01 00:00:00")

    resp = client.put(f"/api/shipments/{created['id']}", json=update)
    assert resp.status_code == 200
    body = resp.json()

    assert body["id"] == created["id"]
    assert body["created_at"] == created["created_at"]
    assert body["status"] == "In Transit"
    assert body["current_location"] == "Hub C"
    assert body["notes"] is None
    assert client.get(f"/api/shipments/{created['id']}").json() == body


def test_update_can_change_identifiers(client, shipment_payload):
    created = create(client, shipment_payload)
    resp = client.put(f"/api/shipments/{created['id']}",
                      json=dict(shipment_payload, device_id="iot-900", shipment_id="SHIP-900"))
    assert resp.status_code == 200
    assert resp.json()["device_id"] == "iot-900"


def test_update_missing_field_is_rejected(client, shipment_payload):
    created = create(client, shipment_payload)
    del shipment_payload["shipment_id"]
    resp = client.put(f"/api/shipments/{created['id']}", json=shipment_payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields"}


def test_update_unknown_id(client, shipment_payload):
    resp = client.put("/api/shipments/999999", json=shipment_payload)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Shipment not found"}


def test_update_into_existing_identifier_is_a_conflict(client, shipment_payload):
    create(client, shipment_payload)
    other = create(client, dict(shipment_payload, device_id="iot-002", shipment_id="SHIP-002"))

    resp = client.put(f"/api/shipments/{other['id']}", json=shipment_payload)
    assert resp.status_code == 409
    assert client.get(f"/api/shipments/{other['id']}").json() == other


def test_delete_echoes_record_and_is_final(client, shipment_payload):
    created = create(client, shipment_payload)

    resp = client.delete(f"/api/shipments/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Shipment deleted successfully", "deletedShipment": created}

    assert client.get(f"/api/shipments/{created['id']}").status_code == 404
    assert client.delete(f"/api/shipments/{created['id']}").status_code == 404


def test_deleted_id_is_not_reused(client, shipment_payload):
    first = create(client, shipment_payload)
    client.delete(f"/api/shipments/{first['id']}")
    second = create(client, shipment_payload)
    assert second["id"] != first["id"]


def test_delete_unknown_id(client):
    resp = client.delete("/api/shipments/999999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Shipment not found"}


def test_status_is_not_restricted_to_canonical_values(client, shipment_payload):
    body = create(client, dict(shipment_payload, status="Held at customs"))
    assert body["status"] == "Held at customs"


def test_create_rejects_overlong_identifier(client, shipment_payload):
    resp = client.post("/api/shipments", json=dict(shipment_payload, device_id="x" * 101))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request body"}


@pytest.mark.parametrize("shipment_pk", ["99999999999999999999", "-99999999999999999999"])
def test_id_outside_integer_range_is_not_found(client, shipment_payload, shipment_pk):
    for method, body in [("GET", None), ("PUT", shipment_payload), ("DELETE", None)]:
        resp = client.request(method, f"/api/shipments/{shipment_pk}", json=body)
        assert resp.status_code == 404
        assert resp.json() == {"error": "Shipment not found"}


def test_concurrent_identical_creates_store_one_record(client, shipment_payload, tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(bind=engine)
    RaceSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def race_store():
        db = RaceSession()
        try:
            yield SqlShipmentStore(db)
        finally:
            db.close()

    app.dependency_overrides[get_store] = race_store
    barrier = threading.Barrier(2)
    statuses = []

    def post():
        barrier.wait()
        statuses.append(client.post("/api/shipments", json=shipment_payload).status_code)

    writers = [threading.Thread(target=post) for _ in range(2)]
    for writer in writers:
        writer.start()
    for writer in writers:
        writer.join()

    assert sorted(statuses) == [201, 409]
    with RaceSession() as db:
        assert shipment_repo.count_shipments(db) == 1
    engine.dispose()
