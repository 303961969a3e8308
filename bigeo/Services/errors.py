# bigeo/Services/errors.py

"""
Shipment Error Taxonomy

Raised by validation and by the shipment store, translated into HTTP
responses by the exception handlers registered in bigeo.main.

- ShipmentValidationError  -> 400
- ShipmentNotFoundError    -> 404
- ShipmentConflictError    -> 409
- StorageUnavailableError  -> 500 (details logged, never returned)
"""

from typing import Iterable, Optional


class ShipmentError(Exception):
    """Base class for every shipment-layer error."""

    status_code = 500
    public_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.public_message
        super().__init__(self.message)


class ShipmentValidationError(ShipmentError):
    """Required fields are missing or empty."""

    status_code = 400
    public_message = "Missing required fields"

    def __init__(self, missing_fields: Iterable[str] = (), message: Optional[str] = None):
        self.missing_fields = tuple(missing_fields)
        super().__init__(message)


class ShipmentNotFoundError(ShipmentError):
    """No row matches the addressed id or device_id."""

    status_code = 404
    public_message = "Shipment not found"


class ShipmentConflictError(ShipmentError):
    """The write would violate UNIQUE(device_id) or UNIQUE(shipment_id)."""

    status_code = 409
    public_message = "Shipment with this device_id or shipment_id already exists"

    def __init__(self, context: Optional[dict] = None):
        self.context = context or {}
        super().__init__()


class StorageUnavailableError(ShipmentError):
    """
    The database could not be reached or failed unexpectedly.

    Attributes:
        operation: Store operation that failed (e.g. "create")
        context: Identifiers involved, for the server-side log
    """

    status_code = 500
    public_message = "Internal Server Error"

    def __init__(self, operation: str, context: Optional[dict] = None, cause: Optional[BaseException] = None):
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        super().__init__()

    def describe(self) -> str:
        parts = [f"operation={self.operation}"]
        parts.extend(f"{key}={value!r}" for key, value in self.context.items())
        if self.cause is not None:
            parts.append(f"cause={type(self.cause).__name__}: {self.cause}")
        return " ".join(parts)
