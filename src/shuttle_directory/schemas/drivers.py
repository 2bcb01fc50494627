"""Driver directory API schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ..models.domain import Driver
from ..services.states import normalize_state

DriverStatus = Literal["available", "on_trip", "offline"]


class DriverModel(BaseModel):
    id: str
    name: str
    phoneNumber: Optional[str] = None
    email: Optional[str] = None
    state: str
    city: str
    status: DriverStatus
    vehicleType: Optional[str] = None
    serviceLocations: Optional[str] = None
    notes: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_domain(cls, driver: Driver) -> "DriverModel":
        return cls(
            id=driver.id,
            name=driver.name,
            phoneNumber=driver.phone_number,
            email=driver.email,
            state=driver.state,
            city=driver.city,
            status=driver.status,
            vehicleType=driver.vehicle_type,
            serviceLocations=driver.service_locations,
            notes=driver.notes,
            createdAt=driver.created_at,
            updatedAt=driver.updated_at,
        )


class DriverCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    phoneNumber: Optional[str] = None
    email: Optional[EmailStr] = None
    state: str
    city: str = Field(..., min_length=1)
    status: DriverStatus = "available"
    vehicleType: Optional[str] = None
    serviceLocations: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("state")
    @classmethod
    def _normalize_state(cls, value: str) -> str:
        code = normalize_state(value)
        if code is None:
            raise ValueError(f"Unknown US state '{value}'")
        return code

    @field_validator("name", "city")
    @classmethod
    def _strip(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped

    def to_domain_fields(self) -> dict:
        return {
            "name": self.name,
            "phone_number": self.phoneNumber,
            "email": str(self.email) if self.email else None,
            "state": self.state,
            "city": self.city,
            "status": self.status,
            "vehicle_type": self.vehicleType,
            "service_locations": self.serviceLocations,
            "notes": self.notes,
        }


class DriverUpdateRequest(DriverCreateRequest):
    pass


class DriverResponse(BaseModel):
    driver: DriverModel


class DriversResponse(BaseModel):
    drivers: List[DriverModel]


class StateSummaryModel(BaseModel):
    code: str
    name: str
    driverCount: int


class StatesResponse(BaseModel):
    states: List[StateSummaryModel]


class CitySummaryModel(BaseModel):
    name: str
    driverCount: int


class CitiesResponse(BaseModel):
    cities: List[CitySummaryModel]


class DirectoryStatsResponse(BaseModel):
    totalCompanies: int
    totalStates: int
