# bigeo/Controller/Routes/shipments.py

"""
Shipment Management REST API

This module provides the REST endpoints the dashboard and tracking page use
to manage shipment records.

Endpoints:
- GET    /api/shipments          List all shipments (ascending id)
- GET    /api/shipments/{id}     Get one shipment
- POST   /api/shipments          Create a shipment
- PUT    /api/shipments/{id}     Replace a shipment
- DELETE /api/shipments/{id}     Delete a shipment

Errors are raised as bigeo.Services.errors exceptions and rendered as
{"error": "..."} by the handlers registered in bigeo.main.

Usage:
    # In main.py
    from bigeo.Controller.Routes import shipments
    app.include_router(shipments.router, prefix="/api/shipments", tags=["shipments"])
"""

from fastapi import APIRouter, Depends
from typing import List
from bigeo.Controller.deps import get_store
from bigeo.Core.log_ws import log_from_thread
from bigeo.Schemas import shipment as shipment_schema
from bigeo.Services.errors import ShipmentNotFoundError
from bigeo.Services.shipment_store import ShipmentStore
from bigeo.Services.validation import validate_create, validate_update

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": shipment_schema.Error_response},
    404: {"model": shipment_schema.Error_response},
    409: {"model": shipment_schema.Error_response},
    500: {"model": shipment_schema.Error_response},
}


# Signed 64-bit range: the widest INTEGER either engine stores
SHIPMENT_PK_MIN = -(2 ** 63)
SHIPMENT_PK_MAX = 2 ** 63 - 1


def parse_shipment_pk(raw: str) -> int:
    """Path ids that are not integers, or do not fit a 64-bit INTEGER, cannot match any row."""
    try:
        pk = int(raw)
    except ValueError:
        raise ShipmentNotFoundError()

    if not SHIPMENT_PK_MIN <= pk <= SHIPMENT_PK_MAX:
        raise ShipmentNotFoundError()
    return pk


# ==========================================================
# 📌 List Shipments
# ==========================================================

@router.get("", response_model=List[shipment_schema.Shipment_get])
def list_shipments(store: ShipmentStore = Depends(get_store)):
    """
    Get every shipment, ordered by ascending id.

    Returns:
        [
            {
                "id": 1,
                "device_id": "iot-001",
                "shipment_id": "SHIP-001",
                "status": "In Transit",
                "current_location": "Hub C",
                "destination_location": "Warehouse B",
                "notes": null,
                "created_at": "2025-01-12 16:04:11"
            },
            ...
        ]
    """
    return [shipment_schema.Shipment_get.model_validate(s) for s in store.list()]


# ==========================================================
# 📌 Get Specific Shipment
# ==========================================================

@router.get("/{shipment_pk}", response_model=shipment_schema.Shipment_get, responses=ERROR_RESPONSES)
def get_shipment(shipment_pk: str, store: ShipmentStore = Depends(get_store)):
    """
    Get one shipment by its numeric id (used by the public tracking page).

    Raises:
        404: Shipment not found
    """
    shipment = store.get(parse_shipment_pk(shipment_pk))
    return shipment_schema.Shipment_get.model_validate(shipment)


# ==========================================================
# 📌 Create Shipment
# ==========================================================

@router.post("", response_model=shipment_schema.Shipment_get, status_code=201, responses=ERROR_RESPONSES)
def create_shipment(
    payload: shipment_schema.Shipment_create,
    store: ShipmentStore = Depends(get_store)
):
    """
    Create a shipment.

    status, current_location and destination_location are required.
    device_id and shipment_id must be sent together; when both are omitted
    a matching pair (iot-NNNNN / SHIP-NNNNN) is generated. created_at is
    generated unless supplied.

    Example Request:
        POST /api/shipments
        {
            "device_id": "iot-001",
            "shipment_id": "SHIP-001",
            "status": "Pending",
            "current_location": "Warehouse A",
            "destination_location": "Warehouse B"
        }

    Raises:
        400: Missing required fields
        409: device_id or shipment_id already exists
    """
    shipment = validate_create(payload)
    created = store.create(shipment)

    log_from_thread(
        f"[SHIPMENTS] Created shipment id={created.id} "
        f"device_id={created.device_id} shipment_id={created.shipment_id}"
    )
    return shipment_schema.Shipment_get.model_validate(created)


# ==========================================================
# 📌 Replace Shipment
# ==========================================================

@router.put("/{shipment_pk}", response_model=shipment_schema.Shipment_get, responses=ERROR_RESPONSES)
def update_shipment(
    shipment_pk: str,
    payload: shipment_schema.Shipment_update,
    store: ShipmentStore = Depends(get_store)
):
    """
    Replace every mutable field of a shipment.

    device_id, shipment_id, status, current_location and
    destination_location are required; an omitted notes field clears the
    stored notes. id and created_at never change.

    Raises:
        400: Missing required fields
        404: Shipment not found
        409: device_id or shipment_id belongs to another shipment
    """
    pk = parse_shipment_pk(shipment_pk)
    shipment = validate_update(payload)
    updated = store.replace(pk, shipment)

    log_from_thread(f"[SHIPMENTS] Updated shipment id={updated.id} status={updated.status!r}")
    return shipment_schema.Shipment_get.model_validate(updated)


# ==========================================================
# 📌 Delete Shipment
# ==========================================================

@router.delete("/{shipment_pk}", response_model=shipment_schema.Shipment_delete, responses=ERROR_RESPONSES)
def delete_shipment(shipment_pk: str, store: ShipmentStore = Depends(get_store)):
    """
    Delete a shipment (hard delete).

    Returns:
        {
            "message": "Shipment deleted successfully",
            "deletedShipment": { ...the removed record... }
        }

    Raises:
        404: Shipment not found
    """
    deleted = store.delete(parse_shipment_pk(shipment_pk))

    log_from_thread(f"[SHIPMENTS] Deleted shipment id={deleted.id} device_id={deleted.device_id}")
    return shipment_schema.Shipment_delete(
        deletedShipment=shipment_schema.Shipment_get.model_validate(deleted)
    )
