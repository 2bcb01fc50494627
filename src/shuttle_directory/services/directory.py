"""State → city → driver listings over the driver directory."""

from __future__ import annotations

from collections import Counter
from typing import Optional

from ..data.drivers_repository import load_drivers
from ..models.domain import Driver
from .states import US_STATES, normalize_state


def list_drivers(state: Optional[str] = None, city: Optional[str] = None) -> list[Driver]:
    """Drivers sorted by name, optionally filtered to one state and city."""

    drivers = list(load_drivers())
    if state:
        code = normalize_state(state) or state.strip().upper()
        drivers = [driver for driver in drivers if driver.state == code]
    if city:
        wanted = city.strip().lower()
        drivers = [driver for driver in drivers if driver.city.strip().lower() == wanted]
    return sorted(drivers, key=lambda driver: driver.name.lower())


def list_states() -> list[dict]:
    """States that have at least one driver, with counts, ordered by state name."""

    counts: Counter[str] = Counter(driver.state for driver in load_drivers())
    states = [
        {"code": code, "name": US_STATES.get(code, code), "driverCount": count}
        for code, count in counts.items()
    ]
    return sorted(states, key=lambda entry: entry["name"])


def list_cities(state: str) -> list[dict]:
    code = normalize_state(state)
    if code is None:
        raise ValueError(f"Unknown state '{state}'.")
    counts: Counter[str] = Counter(driver.city for driver in load_drivers() if driver.state == code)
    return [{"name": name, "driverCount": counts[name]} for name in sorted(counts, key=str.lower)]


def compute_directory_stats() -> dict:
    drivers = load_drivers()
    return {
        "totalCompanies": len(drivers),
        "totalStates": len({driver.state for driver in drivers}),
    }
