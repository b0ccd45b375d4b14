"""
Pytest configuration and fixtures
"""
import base64

import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from safereport.auth.operators import OperatorService
from safereport.core.exceptions import GeolocationError
from safereport.database.connection import init_db
from safereport.database.store import ReportStore
from safereport.ingestion.geocoding_client import GeoLocation

# Smallest valid PNG (1x1 transparent pixel)
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


class FakeGeocoder:
    """Stands in for GeocodingClient without network access."""

    def __init__(self, address="12 Market Street, Springfield", fail=False, configured=True):
        self.address = address
        self.fail = fail
        self.is_configured = configured
        self.calls = []

    def reverse(self, latitude, longitude):
        self.calls.append(("reverse", latitude, longitude))
        if self.fail:
            raise GeolocationError("No location found (ZERO_RESULTS)")
        return GeoLocation(latitude=latitude, longitude=longitude, formatted_address=self.address)

    def resolve_address(self, address):
        self.calls.append(("search", address))
        if self.fail:
            raise GeolocationError("No location found (ZERO_RESULTS)")
        return GeoLocation(latitude=40.7128, longitude=-74.006, formatted_address=address)

    def close(self):
        pass


@pytest.fixture
def db():
    """Fresh in-memory database installed as the global connection."""
    database = init_db("sqlite://")
    yield database
    database.drop_tables()
    database.close()


@pytest.fixture
def session(db):
    session = db.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def store(session):
    return ReportStore(session)


@pytest.fixture
def operator(session):
    """Registered operator account."""
    return OperatorService(session).register(
        "operator@example.com", "correct-horse-battery", "Duty Operator"
    )


@pytest.fixture
def auth_headers(session, operator):
    token = OperatorService(session).issue_token(operator)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def png_data_uri():
    return "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")


@pytest.fixture
def sample_payload():
    """Typical citizen submission."""
    return {
        "urgency": "EMERGENCY",
        "category": "Fire Outbreak",
        "title": "Smoke from warehouse",
        "description": "Thick black smoke coming from the warehouse roof on 5th Avenue.",
        "location": "5th Avenue warehouse district",
    }


@pytest.fixture
def fake_geocoder():
    return FakeGeocoder()


@pytest.fixture
def make_geocoder():
    return FakeGeocoder
