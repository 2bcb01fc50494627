"""Distance calculator endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...errors import DistanceError, GeocodeFailed, InputInvalid, NoCandidates
from ...schemas.distance import (
    ClosestDriverModel,
    ClosestDriverRequest,
    ClosestDriverResponse,
    DistanceCalculationRequest,
    DistanceCalculationResponse,
)
from ...services.calculator import DistanceCalculator, SessionRegistry
from ..dependencies import get_calculator, get_sessions

router = APIRouter(prefix="/distance", tags=["distance"])

logger = logging.getLogger(__name__)


@router.post("/calculate", response_model=DistanceCalculationResponse, status_code=status.HTTP_200_OK)
def calculate_distance(
    payload: DistanceCalculationRequest,
    calculator: DistanceCalculator = Depends(get_calculator),
    sessions: SessionRegistry = Depends(get_sessions),
) -> DistanceCalculationResponse:
    """Driving distance from drop-off to pickup plus the closest driver to the pickup.

    With a ``sessionId``, a response that was overtaken by a newer query from
    the same session is flagged ``stale`` so the client can drop it.
    """
    try:
        if payload.sessionId:
            tracker = sessions.get(payload.sessionId)
            result, applied = calculator.calculate_latest(tracker, payload.dropOffCity, payload.pickupCity)
            return DistanceCalculationResponse.from_domain(result, stale=not applied)
        result = calculator.calculate(payload.dropOffCity, payload.pickupCity)
        return DistanceCalculationResponse.from_domain(result)
    except InputInvalid as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.user_message) from exc
    except GeocodeFailed as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.user_message) from exc
    except DistanceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.user_message) from exc
    except Exception as exc:
        logger.exception(f"Distance calculation error: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=DistanceError().user_message,
        ) from exc


@router.post("/closest-driver", response_model=ClosestDriverResponse, status_code=status.HTTP_200_OK)
def closest_driver(
    payload: ClosestDriverRequest,
    calculator: DistanceCalculator = Depends(get_calculator),
) -> ClosestDriverResponse:
    match = calculator.closest_driver(payload.to_point())
    if match is None:
        return ClosestDriverResponse(closestDriver=None, message=NoCandidates().user_message)
    return ClosestDriverResponse(closestDriver=ClosestDriverModel.from_domain(match))
