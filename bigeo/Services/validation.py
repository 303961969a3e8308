# bigeo/Services/validation.py

"""
Request Validation

Pure functions from a raw request schema to a validated one. They run
before any database access and either return the validated struct or
raise ShipmentValidationError listing the missing fields.

A field counts as missing when it is absent, null or an empty string.
"""

from typing import List, Optional

from bigeo.Schemas.shipment import (
    Shipment_create,
    Shipment_update,
    Device_status_update,
    Shipment_new,
    Shipment_replace,
    Device_status,
)
from bigeo.Services.errors import ShipmentValidationError
from bigeo.Services.identifiers import generate_identifiers, normalize_created_at


CREATE_REQUIRED = ("status", "current_location", "destination_location")
UPDATE_REQUIRED = ("device_id", "shipment_id", "status", "current_location", "destination_location")
DEVICE_STATUS_REQUIRED = ("device_id", "current_location", "status")


def is_missing(value: Optional[str]) -> bool:
    return value is None or value == ""


def missing_fields(payload, required) -> List[str]:
    return [name for name in required if is_missing(getattr(payload, name))]


def validate_create(payload: Shipment_create, generate=generate_identifiers) -> Shipment_new:
    """
    Validate a create request.

    Identifiers are generated only when BOTH device_id and shipment_id are
    missing. Supplying exactly one of them is rejected, the other one being
    reported as missing.

    Args:
        payload: Raw request body
        generate: Callable returning a (device_id, shipment_id) pair

    Returns:
        Shipment_new: Validated record to insert

    Raises:
        ShipmentValidationError: Required fields are missing
    """
    device_id = payload.device_id
    shipment_id = payload.shipment_id

    if is_missing(device_id) and is_missing(shipment_id):
        missing = missing_fields(payload, CREATE_REQUIRED)
        if missing:
            raise ShipmentValidationError(missing)
        device_id, shipment_id = generate()
    else:
        missing = missing_fields(payload, ("device_id", "shipment_id") + CREATE_REQUIRED)
        if missing:
            raise ShipmentValidationError(missing)

    created_at = None
    if not is_missing(payload.created_at):
        try:
            created_at = normalize_created_at(payload.created_at)
        except ValueError:
            raise ShipmentValidationError(("created_at",), message="Invalid request body")

    return Shipment_new(
        device_id=device_id,
        shipment_id=shipment_id,
        status=payload.status,
        current_location=payload.current_location,
        destination_location=payload.destination_location,
        notes=payload.notes,
        created_at=created_at,
    )


def validate_update(payload: Shipment_update) -> Shipment_replace:
    """Validate a full-replace request. notes may be omitted (stored as null)."""
    missing = missing_fields(payload, UPDATE_REQUIRED)
    if missing:
        raise ShipmentValidationError(missing)

    return Shipment_replace(**payload.model_dump(include=set(UPDATE_REQUIRED) | {"notes"}))


def validate_device_status(payload: Device_status_update) -> Device_status:
    """Validate an IoT status report."""
    missing = missing_fields(payload, DEVICE_STATUS_REQUIRED)
    if missing:
        raise ShipmentValidationError(missing)

    return Device_status(**payload.model_dump())
