"""Driver directory storage with a database-first approach, falling back to a JSON file."""

from __future__ import annotations

import functools
import logging
import threading
import uuid
from dataclasses import asdict, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import DRIVER_STATUSES, Driver
from ..persistence.filesystem import FileStorage

DRIVERS_TABLE = "drivers"
_DRIVER_FIELDS = {f.name for f in fields(Driver)}

# Serializes read-modify-write cycles on the driver file.
_write_lock = threading.Lock()

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_driver(row: dict[str, Any]) -> Driver:
    values = {key: row.get(key) for key in _DRIVER_FIELDS if key in row}
    for required in ("id", "name", "state", "city"):
        if not values.get(required):
            raise ValueError(f"Driver row is missing '{required}'")
    for key in ("id", "name", "state", "city"):
        values[key] = str(values[key])
    # Rows written before status existed have none; treat them as available.
    status = values.get("status") or "available"
    if status not in DRIVER_STATUSES:
        raise ValueError(f"Driver row has unknown status '{status}'")
    values["status"] = status
    return Driver(**values)


def _load_drivers_from_database() -> tuple[Driver, ...] | None:
    """Load drivers from Supabase. Returns None if the database is not available."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    try:
        response = supabase.table(DRIVERS_TABLE).select("*").order("name").execute()
    except Exception as e:
        logger.warning(f"Driver query failed, falling back to file: {e}")
        return None

    drivers: list[Driver] = []
    for row in response.data or []:
        try:
            drivers.append(_row_to_driver(row))
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid driver row: {e}")
    return tuple(drivers)


def _read_driver_rows(source: Path | None = None) -> list[Any] | None:
    """Raw records from the driver file, or None when the file does not exist."""
    path = source or settings.drivers_file
    payload = FileStorage(root=path.parent).read_json(path, default=None)
    if payload is None:
        return None
    rows = payload.get("drivers", []) if isinstance(payload, dict) else payload
    if not isinstance(rows, list):
        raise ValueError(f"Driver file '{path}' must contain a list of drivers.")
    return rows


def _write_driver_rows(rows: list[Any], source: Path | None = None) -> None:
    path = source or settings.drivers_file
    FileStorage(root=path.parent).write_json(path, {"drivers": rows})


def _load_drivers_from_file(source: Path | None = None) -> tuple[Driver, ...]:
    path = source or settings.drivers_file
    rows = _read_driver_rows(path)
    if rows is None:
        logger.info(f"Driver file not found at {path}; directory is empty")
        return tuple()

    drivers: list[Driver] = []
    for row in rows:
        try:
            drivers.append(_row_to_driver(row))
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid driver record in {path.name}: {e}")
    return tuple(drivers)


def _row_id(row: Any) -> str | None:
    if isinstance(row, dict) and row.get("id") is not None:
        return str(row["id"])
    return None


@functools.lru_cache(maxsize=1)
def load_drivers() -> tuple[Driver, ...]:
    """Snapshot of every driver in the directory. Cleared after each write."""
    drivers = _load_drivers_from_database()
    if drivers is not None:
        return drivers
    return _load_drivers_from_file()


def get_driver(driver_id: str) -> Optional[Driver]:
    for driver in load_drivers():
        if driver.id == driver_id:
            return driver
    return None


def create_driver(values: dict[str, Any]) -> Driver:
    timestamp = _now()
    driver = Driver(
        **{key: value for key, value in values.items() if key in _DRIVER_FIELDS and key not in {"id", "created_at", "updated_at"}},
        id=uuid.uuid4().hex,
        created_at=timestamp,
        updated_at=timestamp,
    )
    with _write_lock:
        supabase = get_supabase_client()
        if supabase:
            supabase.table(DRIVERS_TABLE).insert(asdict(driver)).execute()
        else:
            rows = _read_driver_rows() or []
            rows.append(asdict(driver))
            _write_driver_rows(rows)
        load_drivers.cache_clear()
    logger.info(f"Created driver {driver.id}")
    return driver


def update_driver(driver_id: str, values: dict[str, Any]) -> Optional[Driver]:
    """Apply ``values`` to one driver. Other stored records are written back untouched."""
    changes = {key: value for key, value in values.items() if key in _DRIVER_FIELDS and key not in {"id", "created_at"}}
    changes["updated_at"] = _now()
    with _write_lock:
        supabase = get_supabase_client()
        if supabase:
            response = supabase.table(DRIVERS_TABLE).update(changes).eq("id", driver_id).execute()
            load_drivers.cache_clear()
            if not response.data:
                return None
            return _row_to_driver(response.data[0])

        rows = _read_driver_rows() or []
        for index, row in enumerate(rows):
            if _row_id(row) == driver_id:
                updated = _row_to_driver({**row, **changes})
                rows[index] = {**row, **asdict(updated)}
                _write_driver_rows(rows)
                load_drivers.cache_clear()
                return updated
    return None


def delete_driver(driver_id: str) -> bool:
    with _write_lock:
        supabase = get_supabase_client()
        if supabase:
            response = supabase.table(DRIVERS_TABLE).delete().eq("id", driver_id).execute()
            load_drivers.cache_clear()
            return bool(response.data)

        rows = _read_driver_rows() or []
        remaining = [row for row in rows if _row_id(row) != driver_id]
        if len(remaining) == len(rows):
            return False
        _write_driver_rows(remaining)
        load_drivers.cache_clear()
    logger.info(f"Deleted driver {driver_id}")
    return True
