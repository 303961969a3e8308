# bigeo/Models/shipment.py

"""
Shipment Model - Tracked Consignments

This module defines the SQLAlchemy model for shipment records, the only
table of the backend.

Database Table: shipments
Primary Key: id (Integer, autoincrement)

Usage:
    from bigeo.Models.shipment import Shipment
    from bigeo.DB.session import SessionLocal

    db = SessionLocal()
    shipment = Shipment(
        device_id="iot-001",
        shipment_id="SHIP-001",
        status="Pending",
        current_location="Warehouse A",
        destination_location="Warehouse B",
        created_at="2025-01-12 16:04:11",
    )
    db.add(shipment)
    db.commit()
"""

from sqlalchemy.orm import declared_attr
from sqlalchemy import Column, Integer, String, Text
from bigeo.DB.base_class import Base


class Shipment(Base):
    """
    SQLAlchemy model representing a single tracked consignment.

    Schema:
    - id (PK): Server-assigned, never reused
    - device_id: IoT tracker attached to the shipment (unique)
    - shipment_id: External shipment reference (unique)
    - status: Free text; the dashboard knows "Pending", "In Transit",
      "Out for Delivery" and "Delivered"
    - current_location / destination_location: Free text locations
    - notes: Optional remarks
    - created_at: "YYYY-MM-DD HH:MM:SS" (UTC+05:30), set once at insert

    Constraints:
    - UNIQUE(device_id), UNIQUE(shipment_id): duplicates fail at insert
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "shipments"

    # SQLite would otherwise reuse the id of the last deleted row
    __table_args__ = {"sqlite_autoincrement": True}

    # ============================================================
    # Primary Key
    # ============================================================
    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Internal numeric identifier"
    )

    # ============================================================
    # External Identifiers
    # ============================================================
    device_id = Column(
        String(100),
        unique=True,
        nullable=False,
        doc="IoT device identifier (e.g., 'iot-00042')"
    )

    shipment_id = Column(
        String(100),
        unique=True,
        nullable=False,
        doc="Shipment reference (e.g., 'SHIP-00042')"
    )

    # ============================================================
    # Tracking State
    # ============================================================
    status = Column(String(50), nullable=False)
    current_location = Column(String(255), nullable=False)
    destination_location = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)

    # ============================================================
    # Timestamps
    # ============================================================
    created_at = Column(
        String(19),
        nullable=False,
        doc="Creation time at UTC+05:30, never updated"
    )

    def __repr__(self) -> str:
        return (
            f"<Shipment(id={self.id}, device_id={self.device_id!r}, "
            f"shipment_id={self.shipment_id!r}, status={self.status!r})>"
        )
