import os

# Point the engine at in-memory SQLite before bigeo.Core.config is imported.
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from bigeo.main import app
from bigeo.DB.database import create_all_tables, drop_all_tables
from bigeo.DB.session import SessionLocal


@pytest.fixture(autouse=True)
def fresh_schema():
    drop_all_tables()
    create_all_tables()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    with SessionLocal() as session:
        yield session


@pytest.fixture
def shipment_payload():
    return {
        "device_id": "iot-001",
        "shipment_id": "SHIP-001",
        "status": "Pending",
        "current_location": "Warehouse A",
        "destination_location": "Warehouse B",
    }
