# bigeo/Services/shipment_store.py

"""
Shipment Store

The API layer talks to this interface only. SqlShipmentStore implements it
on top of bigeo.Repositories.shipment and serves both supported engines
(PostgreSQL and SQLite); the engine is picked by the configured URL.

Error Translation:
-----------------
- IntegrityError            -> ShipmentConflictError
- any other SQLAlchemyError -> StorageUnavailableError
- zero affected rows        -> ShipmentNotFoundError

The session is rolled back before any error leaves the store, so the
request's session can still be closed cleanly.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bigeo.Repositories import shipment as shipment_repo
from bigeo.Schemas.shipment import Shipment_new, Shipment_replace, Device_status
from bigeo.Services.errors import (
    ShipmentConflictError,
    ShipmentNotFoundError,
    StorageUnavailableError,
)


DEVICE_NOT_FOUND_MESSAGE = "No shipment found for the given device ID"


class ShipmentStore(ABC):
    """
    Durable table of shipment records.

    Every method is a single atomic interaction with the underlying engine.
    Returned records expose the shipment columns as attributes.
    """

    @abstractmethod
    def list(self) -> List[Any]:
        """All shipments, ascending id."""

    @abstractmethod
    def get(self, shipment_pk: int) -> Any:
        """Raises ShipmentNotFoundError."""

    @abstractmethod
    def get_by_device_id(self, device_id: str) -> Any:
        """Raises ShipmentNotFoundError."""

    @abstractmethod
    def create(self, shipment: Shipment_new) -> Any:
        """Raises ShipmentConflictError."""

    @abstractmethod
    def replace(self, shipment_pk: int, shipment: Shipment_replace) -> Any:
        """Raises ShipmentNotFoundError, ShipmentConflictError."""

    @abstractmethod
    def update_device_status(self, report: Device_status) -> Any:
        """Raises ShipmentNotFoundError."""

    @abstractmethod
    def delete(self, shipment_pk: int) -> Any:
        """Returns the deleted record. Raises ShipmentNotFoundError."""


class SqlShipmentStore(ShipmentStore):
    """SQLAlchemy implementation bound to one request's session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _translate(self, operation: str, **context):
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            raise ShipmentConflictError(context) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageUnavailableError(operation, context, cause=e) from e

    def list(self) -> List[Any]:
        with self._translate("list"):
            return shipment_repo.get_all_shipments(self.db)

    def get(self, shipment_pk: int) -> Any:
        with self._translate("get", id=shipment_pk):
            shipment = shipment_repo.get_shipment_by_id(self.db, shipment_pk)
        if shipment is None:
            raise ShipmentNotFoundError()
        return shipment

    def get_by_device_id(self, device_id: str) -> Any:
        with self._translate("get_by_device_id", device_id=device_id):
            shipment = shipment_repo.get_shipment_by_device_id(self.db, device_id)
        if shipment is None:
            raise ShipmentNotFoundError(DEVICE_NOT_FOUND_MESSAGE)
        return shipment

    def create(self, shipment: Shipment_new) -> Any:
        with self._translate("create", device_id=shipment.device_id, shipment_id=shipment.shipment_id):
            return shipment_repo.insert_shipment(self.db, shipment)

    def replace(self, shipment_pk: int, shipment: Shipment_replace) -> Any:
        with self._translate("replace", id=shipment_pk, device_id=shipment.device_id,
                             shipment_id=shipment.shipment_id):
            row = shipment_repo.update_shipment(self.db, shipment_pk, shipment)
        if row is None:
            raise ShipmentNotFoundError()
        return row

    def update_device_status(self, report: Device_status) -> Any:
        with self._translate("update_device_status", device_id=report.device_id):
            row = shipment_repo.update_shipment_by_device_id(self.db, report)
        if row is None:
            raise ShipmentNotFoundError(DEVICE_NOT_FOUND_MESSAGE)
        return row

    def delete(self, shipment_pk: int) -> Any:
        with self._translate("delete", id=shipment_pk):
            row = shipment_repo.delete_shipment(self.db, shipment_pk)
        if row is None:
            raise ShipmentNotFoundError()
        return row
