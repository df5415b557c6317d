"""
Shared fixtures: in-memory SQLite database, ledger gateway and API client.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date
from decimal import Decimal
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.charge_type import ChargeType
from app.models.party import Party
from app.models.supplier import Supplier, Vehicle
from app.models.trip import Trip, TripStatus
from app.services.ledger_gateway import SqlAlchemyLedgerGateway

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """API client sharing the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def gateway(db):
    return SqlAlchemyLedgerGateway(db)


@pytest.fixture
def party(db):
    party = Party(name="Shree Cements", contact_no="9800000001")
    db.add(party)
    db.commit()
    db.refresh(party)
    return party


@pytest.fixture
def vehicle(db):
    supplier = Supplier(name="Ravi Transport", contact_no="9800000002")
    vehicle = Vehicle(vehicle_no="MH12AB1234")
    supplier.vehicles.append(vehicle)
    db.add(supplier)
    db.commit()
    db.refresh(vehicle)
    return vehicle


@pytest.fixture
def charge_type(db):
    charge_type = ChargeType(name="Detention", is_custom=False)
    db.add(charge_type)
    db.commit()
    db.refresh(charge_type)
    return charge_type


@pytest.fixture
def make_trip(db, party, vehicle):
    """Factory for trips owned by the fixture party and vehicle."""
    def _make_trip(freight_party="5000", freight_supplier="4500", pod_uploaded=False, **fields):
        trip = Trip(
            date=fields.pop("date", date(2024, 5, 1)),
            party_id=party.id,
            vehicle_id=vehicle.id,
            origin=fields.pop("origin", "Pune"),
            destination=fields.pop("destination", "Nagpur"),
            freight_party=Decimal(freight_party),
            freight_supplier=Decimal(freight_supplier),
            pod_uploaded=pod_uploaded,
            status=TripStatus.POD_RECEIVED if pod_uploaded else TripStatus.OPEN,
            **fields,
        )
        db.add(trip)
        db.commit()
        db.refresh(trip)
        return trip

    return _make_trip


@pytest.fixture
def trip(make_trip):
    return make_trip()
