# bigeo/Controller/deps.py

from typing import Generator
from fastapi import Depends
from sqlalchemy.orm import Session
from bigeo.DB.database import get_db
from bigeo.Services.shipment_store import ShipmentStore, SqlShipmentStore


def get_store(db: Session = Depends(get_db)) -> Generator[ShipmentStore, None, None]:
    yield SqlShipmentStore(db)
