# bigeo/Schemas/shipment.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


CANONICAL_STATUSES = ("Pending", "In Transit", "Out for Delivery", "Delivered")
"""Status values the dashboard renders specially. Not enforced."""


class Shipment_create(BaseModel):
    """
    Raw body of POST /api/shipments.

    Every field is optional at this level; presence rules (including the
    generate-both-or-nothing rule for identifiers) live in
    bigeo.Services.validation.validate_create.
    """
    model_config = ConfigDict(extra="ignore")

    device_id: Optional[str] = Field(None, max_length=100)
    shipment_id: Optional[str] = Field(None, max_length=100)
    status: Optional[str] = Field(None, max_length=50)
    current_location: Optional[str] = Field(None, max_length=255)
    destination_location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    created_at: Optional[str] = Field(
        None,
        description="Caller-supplied creation time; generated when omitted"
    )


class Shipment_update(BaseModel):
    """
    Raw body of PUT /api/shipments/{id} (whole-record replace).

    id and created_at are not part of the body; if sent they are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    device_id: Optional[str] = Field(None, max_length=100)
    shipment_id: Optional[str] = Field(None, max_length=100)
    status: Optional[str] = Field(None, max_length=50)
    current_location: Optional[str] = Field(None, max_length=255)
    destination_location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class Device_status_update(BaseModel):
    """Raw body of POST /api/iot-data."""
    model_config = ConfigDict(extra="ignore")

    device_id: Optional[str] = Field(None, max_length=100)
    current_location: Optional[str] = Field(None, max_length=255)
    status: Optional[str] = Field(None, max_length=50)


class Shipment_new(BaseModel):
    """Validated create request, ready for insertion."""

    device_id: str
    shipment_id: str
    status: str
    current_location: str
    destination_location: str
    notes: Optional[str] = None
    created_at: Optional[str] = None


class Shipment_replace(BaseModel):
    """Validated full-replace request."""

    device_id: str
    shipment_id: str
    status: str
    current_location: str
    destination_location: str
    notes: Optional[str] = None


class Device_status(BaseModel):
    """Validated device status report."""

    device_id: str
    current_location: str
    status: str


class Shipment_get(BaseModel):
    """
    Shipment record as returned by every endpoint.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    device_id: str
    shipment_id: str
    status: str
    current_location: str
    destination_location: str
    notes: Optional[str] = None
    created_at: str


class Shipment_delete(BaseModel):
    """Response of DELETE /api/shipments/{id}."""

    message: str = "Shipment deleted successfully"
    deletedShipment: Shipment_get


class Error_response(BaseModel):
    """Body of every non-2xx response."""

    error: str
