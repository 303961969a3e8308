# bigeo/Controller/Routes/iot.py

"""
IoT Device Status API

Endpoint used by tracking devices to report their live position:

- POST /api/iot-data   Update status and current_location of the shipment
                       tracked by device_id

Nothing else on the record changes.
"""

from fastapi import APIRouter, Depends
from bigeo.Controller.deps import get_store
from bigeo.Controller.Routes.shipments import ERROR_RESPONSES
from bigeo.Core.log_ws import log_from_thread
from bigeo.Schemas import shipment as shipment_schema
from bigeo.Services.shipment_store import ShipmentStore
from bigeo.Services.validation import validate_device_status

router = APIRouter()


@router.post("/iot-data", response_model=shipment_schema.Shipment_get, responses=ERROR_RESPONSES)
def receive_device_status(
    payload: shipment_schema.Device_status_update,
    store: ShipmentStore = Depends(get_store)
):
    """
    Apply a device status report.

    Example Request:
        POST /api/iot-data
        {
            "device_id": "iot-001",
            "current_location": "Hub C",
            "status": "Out for Delivery"
        }

    Raises:
        400: Missing required fields
        404: No shipment found for the given device ID
    """
    report = validate_device_status(payload)
    updated = store.update_device_status(report)

    log_from_thread(
        f"[IOT] Device {report.device_id} reported {report.status!r} at {report.current_location!r}"
    )
    return shipment_schema.Shipment_get.model_validate(updated)
