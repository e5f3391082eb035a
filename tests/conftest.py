import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from emr_scheduling.db.session import get_db
from emr_scheduling.main import app
from emr_scheduling.models import (
    Base,
    CalendarCategory,
    CalendarEvent,
    Facility,
    Patient,
    Provider,
)
from emr_scheduling.services.calendar_defaults import ensure_default_statuses


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def api_client(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def patient(db_session):
    record = Patient(fname="Ada", lname="Lovelace", dob=date(1980, 12, 10), email="ada@example.com")
    db_session.add(record)
    db_session.commit()
    return record


@pytest.fixture()
def facility(db_session):
    record = Facility(name="Main Clinic")
    db_session.add(record)
    db_session.commit()
    return record


@pytest.fixture()
def provider(db_session):
    record = Provider(username="drsmith", fname="Jane", lname="Smith", npi="1234567890")
    db_session.add(record)
    db_session.commit()
    return record


@pytest.fixture()
def category(db_session):
    record = CalendarCategory(constant_id="office_visit", catname="Office Visit", cattype=0, seq=1)
    db_session.add(record)
    db_session.commit()
    return record


@pytest.fixture()
def statuses(db_session):
    ensure_default_statuses(db_session)


@pytest.fixture()
def make_event(db_session, patient, facility, category):
    def _make(**overrides) -> CalendarEvent:
        values = {
            "pid": patient.pid,
            "catid": category.catid,
            "title": "Follow up",
            "hometext": "Blood pressure check",
            "room": "2",
            "duration": 900,
            "event_date": date(2026, 3, 2),
            "start_time": time(9, 0),
            "end_time": time(9, 15),
            "apptstatus": "-",
            "facility_id": facility.id,
            "billing_location_id": facility.id,
        }
        values.update(overrides)
        event = CalendarEvent(**values)
        db_session.add(event)
        db_session.commit()
        return event

    return _make


@pytest.fixture()
def appointment_payload(facility, category):
    def _payload(**overrides) -> dict:
        payload = {
            "pc_catid": category.catid,
            "pc_title": "Office Visit",
            "pc_duration": 900,
            "pc_room": "1",
            "pc_hometext": "Annual physical",
            "pc_apptstatus": "-",
            "pc_eventDate": "2026-04-14",
            "pc_startTime": "10:30",
            "pc_endTime": "10:45",
            "pc_facility": facility.id,
            "pc_billing_location": facility.id,
        }
        payload.update(overrides)
        return payload

    return _payload
