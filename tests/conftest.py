import json
import threading
from pathlib import Path

import pytest

from shuttle_directory.config import settings
from shuttle_directory.data import drivers_repository
from shuttle_directory.models.domain import GeoPoint
from shuttle_directory.services.geocoding import Geocoder

CITY_COORDINATES = {
    "Hollidaysburg, PA": GeoPoint(40.4268, -78.3897),
    "Altoona, PA": GeoPoint(40.5187, -78.3947),
    "Harrisburg, PA": GeoPoint(40.2732, -76.8867),
    "Macungie, PA": GeoPoint(40.5159, -75.5552),
    "Miami, FL": GeoPoint(25.7617, -80.1918),
    "New York, NY": GeoPoint(40.7128, -74.0060),
    "Los Angeles, CA": GeoPoint(34.0522, -118.2437),
}


class DummyGeocoder(Geocoder):
    """Resolves from a fixed table and counts calls per key."""

    def __init__(self, coordinates: dict[str, GeoPoint] | None = None):
        self.coordinates = dict(CITY_COORDINATES if coordinates is None else coordinates)
        self.calls: list[str] = []
        self._lock = threading.Lock()

    @property
    def provider_name(self) -> str:
        return "dummy"

    def geocode(self, query: str) -> GeoPoint | None:
        with self._lock:
            self.calls.append(query)
        return self.coordinates.get(query)


def driver_record(driver_id: str, name: str, city: str, state: str, **extra) -> dict:
    record = {
        "id": driver_id,
        "name": name,
        "city": city,
        "state": state,
        "status": "available",
        "phone_number": None,
        "email": None,
        "vehicle_type": None,
        "service_locations": None,
        "notes": None,
        "created_at": "2025-01-01T00:00:00+00:00",
        "updated_at": "2025-01-01T00:00:00+00:00",
    }
    record.update(extra)
    return record


@pytest.fixture
def dummy_geocoder() -> DummyGeocoder:
    return DummyGeocoder()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point storage at a temp dir, disable Supabase and keep routing offline."""
    monkeypatch.setattr(settings, "data_root", tmp_path)
    monkeypatch.setattr(settings, "drivers_file", tmp_path / "drivers.json")
    monkeypatch.setattr(settings, "osrm_base_url", None)
    monkeypatch.setattr(drivers_repository, "get_supabase_client", lambda: None)
    drivers_repository.load_drivers.cache_clear()
    yield
    drivers_repository.load_drivers.cache_clear()


@pytest.fixture
def drivers_file(tmp_path: Path) -> Path:
    path = tmp_path / "drivers.json"
    records = [
        driver_record("d1", "Blue Ridge Shuttles", "Altoona", "PA", phone_number="814-555-0101"),
        driver_record("d2", "Sunshine Transport", "Miami", "FL", status="on_trip"),
        driver_record("d3", "Keystone Carriers", "Harrisburg", "PA", email="dispatch@keystone.example"),
        driver_record("d4", "Allegheny Movers", "Altoona", "PA"),
    ]
    path.write_text(json.dumps({"drivers": records}), encoding="utf-8")
    return path
