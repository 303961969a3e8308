# bigeo/Repositories/shipment.py

"""
Shipment Repository Module

Database access functions for the shipments table. Each function issues a
single SQL statement; write functions use RETURNING and commit.

Responsibilities:
- Listing and lookups (by id, by device_id)
- Insert, full replace, device status update and delete, each returning
  the affected row

Usage:
    from bigeo.Repositories import shipment as shipment_repo
    from bigeo.DB.session import SessionLocal

    with SessionLocal() as db:
        shipments = shipment_repo.get_all_shipments(db)

Error Handling:
    Driver errors (IntegrityError, OperationalError, ...) propagate to the
    caller, which owns the rollback. See bigeo.Services.shipment_store.
"""

from sqlalchemy.orm import Session
from sqlalchemy import select, insert, update, delete, func
from bigeo.Models.shipment import Shipment
from bigeo.Schemas.shipment import Shipment_new, Shipment_replace, Device_status
from bigeo.Services.identifiers import generate_created_at
from typing import List, Optional, Any


shipments_table = Shipment.__table__

# Writes return plain rows; they stay readable after commit expires the session.
RETURNED_COLUMNS = tuple(shipments_table.c)


# ==========================================================
# 📌 READ OPERATIONS
# ==========================================================

def get_all_shipments(db: Session) -> List[Shipment]:
    """
    Get every shipment ordered by ascending id.

    Example:
        for shipment in get_all_shipments(db):
            print(shipment.shipment_id, shipment.status)
    """
    return list(db.scalars(select(Shipment).order_by(Shipment.id.asc())))


def get_shipment_by_id(db: Session, shipment_pk: int) -> Optional[Shipment]:
    """Get a shipment by its numeric id, or None."""
    return db.scalars(select(Shipment).where(Shipment.id == shipment_pk)).first()


def get_shipment_by_device_id(db: Session, device_id: str) -> Optional[Shipment]:
    """Get the shipment tracked by an IoT device, or None."""
    return db.scalars(select(Shipment).where(Shipment.device_id == device_id)).first()


# ==========================================================
# 📌 WRITE OPERATIONS
# ==========================================================

def insert_shipment(db: Session, shipment: Shipment_new) -> Any:
    """
    Insert a shipment and return the stored row.

    created_at is generated (UTC+05:30) when the caller left it out.

    Raises:
        IntegrityError: device_id or shipment_id already exists
    """
    values = shipment.model_dump(exclude_none=True)
    values.setdefault("notes", None)
    values.setdefault("created_at", generate_created_at())

    row = db.execute(
        insert(shipments_table).values(**values).returning(*RETURNED_COLUMNS)
    ).one()
    db.commit()
    return row


def update_shipment(db: Session, shipment_pk: int, shipment: Shipment_replace) -> Optional[Any]:
    """
    Replace every mutable field of a shipment.

    id and created_at are never written.

    Returns:
        The updated row, or None if no shipment has this id

    Raises:
        IntegrityError: the new device_id or shipment_id belongs to another row
    """
    row = db.execute(
        update(shipments_table)
        .where(shipments_table.c.id == shipment_pk)
        .values(**shipment.model_dump())
        .returning(*RETURNED_COLUMNS)
    ).first()
    db.commit()
    return row


def update_shipment_by_device_id(db: Session, report: Device_status) -> Optional[Any]:
    """
    Apply an IoT status report: only status and current_location change.

    Returns:
        The updated row, or None if no shipment uses this device_id
    """
    row = db.execute(
        update(shipments_table)
        .where(shipments_table.c.device_id == report.device_id)
        .values(status=report.status, current_location=report.current_location)
        .returning(*RETURNED_COLUMNS)
    ).first()
    db.commit()
    return row


def delete_shipment(db: Session, shipment_pk: int) -> Optional[Any]:
    """
    Physically delete a shipment.

    Returns:
        The deleted row, or None if no shipment has this id
    """
    row = db.execute(
        delete(shipments_table)
        .where(shipments_table.c.id == shipment_pk)
        .returning(*RETURNED_COLUMNS)
    ).first()
    db.commit()
    return row


def count_shipments(db: Session) -> int:
    """Total number of shipments."""
    return db.scalar(select(func.count()).select_from(shipments_table)) or 0
