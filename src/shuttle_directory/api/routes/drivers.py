"""Driver directory endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Response, status

from ...data.drivers_repository import create_driver, delete_driver, get_driver, update_driver
from ...schemas.drivers import (
    CitiesResponse,
    CitySummaryModel,
    DirectoryStatsResponse,
    DriverCreateRequest,
    DriverModel,
    DriverResponse,
    DriversResponse,
    DriverUpdateRequest,
    StatesResponse,
    StateSummaryModel,
)
from ...services.directory import compute_directory_stats, list_cities, list_drivers, list_states

router = APIRouter(prefix="/drivers", tags=["drivers"])

logger = logging.getLogger(__name__)


@router.get("", response_model=DriversResponse, status_code=status.HTTP_200_OK)
def get_drivers(
    state: str | None = Query(default=None, description="Optional state code or name filter"),
    city: str | None = Query(default=None, description="Optional city filter"),
) -> DriversResponse:
    return DriversResponse(drivers=[DriverModel.from_domain(driver) for driver in list_drivers(state, city)])


@router.get("/stats", response_model=DirectoryStatsResponse, status_code=status.HTTP_200_OK)
def get_stats() -> DirectoryStatsResponse:
    return DirectoryStatsResponse(**compute_directory_stats())


@router.get("/states", response_model=StatesResponse, status_code=status.HTTP_200_OK)
def get_states() -> StatesResponse:
    return StatesResponse(states=[StateSummaryModel(**entry) for entry in list_states()])


@router.get("/cities/{state}", response_model=CitiesResponse, status_code=status.HTTP_200_OK)
def get_cities(state: str) -> CitiesResponse:
    try:
        cities = list_cities(state)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CitiesResponse(cities=[CitySummaryModel(**entry) for entry in cities])


@router.get("/{driver_id}", response_model=DriverResponse, status_code=status.HTTP_200_OK)
def get_driver_by_id(driver_id: str) -> DriverResponse:
    driver = get_driver(driver_id)
    if driver is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Driver {driver_id} not found")
    return DriverResponse(driver=DriverModel.from_domain(driver))


@router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
def post_driver(payload: DriverCreateRequest) -> DriverResponse:
    try:
        driver = create_driver(payload.to_domain_fields())
    except Exception as exc:
        logger.exception(f"Error creating driver: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create driver: {str(exc)}",
        ) from exc
    return DriverResponse(driver=DriverModel.from_domain(driver))


@router.patch("/{driver_id}", response_model=DriverResponse, status_code=status.HTTP_200_OK)
def patch_driver(driver_id: str, payload: DriverUpdateRequest) -> DriverResponse:
    try:
        driver = update_driver(driver_id, payload.to_domain_fields())
    except Exception as exc:
        logger.exception(f"Error updating driver {driver_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update driver: {str(exc)}",
        ) from exc
    if driver is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Driver {driver_id} not found")
    return DriverResponse(driver=DriverModel.from_domain(driver))


@router.delete("/{driver_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_driver(driver_id: str) -> Response:
    try:
        deleted = delete_driver(driver_id)
    except Exception as exc:
        logger.exception(f"Error deleting driver {driver_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete driver: {str(exc)}",
        ) from exc
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Driver {driver_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
