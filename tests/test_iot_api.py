def create(client, payload):
    resp = client.post("/api/shipments", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_device_update_changes_only_status_and_location(client, shipment_payload):
    created = create(client, dict(shipment_payload, notes="Leave at dock 4"))

    resp = client.post("/api/iot-data", json={
        "device_id": "iot-001",
        "current_location": "Hub C",
        "status": "Out for Delivery",
    })
    assert resp.status_code == 200
    body = resp.json()

    assert body["status"] == "Out for Delivery"
    assert body["current_location"] == "Hub C"
    for key in ("id", "device_id", "shipment_id", "destination_location", "notes", "created_at"):
        assert body[key] == created[key]
    assert client.get(f"/api/shipments/{created['id']}").json() == body


def test_device_update_leaves_other_shipments_alone(client, shipment_payload):
    create(client, shipment_payload)
    other = create(client, dict(shipment_payload, device_id="iot-002", shipment_id="SHIP-002"))

    client.post("/api/iot-data", json={"device_id": "iot-001", "current_location": "Hub C", "status": "Delivered"})
    assert client.get(f"/api/shipments/{other['id']}").json() == other


def test_device_update_unknown_device(client):
    resp = client.post("/api/iot-data", json={
        "device_id": "iot-404",
        "current_location": "Hub C",
        "status": "In Transit",
    })
    assert resp.status_code == 404
    assert resp.json() == {"error": "No shipment found for the given device ID"}


def test_device_update_missing_field(client, shipment_payload):
    create(client, shipment_payload)
    resp = client.post("/api/iot-data", json={"device_id": "iot-001", "status": "In Transit"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields"}


def test_device_update_ignores_extra_fields(client, shipment_payload):
    created = create(client, shipment_payload)
    resp = client.post("/api/iot-data", json={
        "device_id": "iot-001",
        "current_location": "Hub C",
        "status": "In Transit",
        "destination_location": "Somewhere else",
        "shipment_id": "SHIP-999",
    })
    assert resp.status_code == 200
    assert resp.json()["destination_location"] == created["destination_location"]
    assert resp.json()["shipment_id"] == "SHIP-001"


def test_device_walks_through_canonical_statuses(client, shipment_payload):
    from bigeo.Schemas.shipment import CANONICAL_STATUSES

    created = create(client, shipment_payload)
    for status in CANONICAL_STATUSES:
        resp = client.post("/api/iot-data", json={
            "device_id": "iot-001", "current_location": f"{status} hub", "status": status,
        })
        assert resp.json()["status"] == status
    assert client.get(f"/api/shipments/{created['id']}").json()["status"] == "Delivered"
