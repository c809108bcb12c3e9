"""Availability API: weekly templates, blocked times and slot queries."""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from sculpo.api.dependencies import get_availability_service
from sculpo.api.schemas.availability import (
    BlockedTimeResponse,
    BlockTimeRequest,
    DayAvailabilityResponse,
    DaySlotResponse,
    NextAvailableSlotResponse,
    OperationResult,
    ServiceAvailabilityResponse,
    TrainerAvailabilityResponse,
    UnblockResponse,
    WeeklyAvailabilityRequest,
    WeeklyAvailabilityResponse,
    WeeklyScheduleRequest,
)
from sculpo.services import AvailabilityService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["availability"])


@router.put("/trainers/{trainer_id}/availability/weekly", response_model=OperationResult)
async def set_weekly_availability(
    trainer_id: str,
    body: WeeklyAvailabilityRequest,
    service: AvailabilityService = Depends(get_availability_service),
):
    result = await service.set_weekly_availability(
        trainer_id, body.day_of_week, body.start_time, body.end_time, body.is_available
    )
    return OperationResult(**result)


@router.put("/trainers/{trainer_id}/availability/weekly/bulk", response_model=OperationResult)
async def set_weekly_schedule(
    trainer_id: str,
    body: WeeklyScheduleRequest,
    service: AvailabilityService = Depends(get_availability_service),
):
    result = await service.set_weekly_schedule(trainer_id, [e.model_dump() for e in body.entries])
    return OperationResult(**result)


@router.get("/trainers/{trainer_id}/availability", response_model=TrainerAvailabilityResponse)
async def get_trainer_availability(
    trainer_id: str,
    service: AvailabilityService = Depends(get_availability_service),
):
    availability = await service.get_trainer_availability(trainer_id)
    return TrainerAvailabilityResponse(
        weekly_availability=[WeeklyAvailabilityResponse.model_validate(w) for w in availability.weekly_availability],
        blocked_times=[BlockedTimeResponse.model_validate(b) for b in availability.blocked_times],
    )


@router.post("/trainers/{trainer_id}/blocked-times", response_model=OperationResult, status_code=201)
async def block_time_slot(
    trainer_id: str,
    body: BlockTimeRequest,
    service: AvailabilityService = Depends(get_availability_service),
):
    result = await service.block_time_slot(
        trainer_id, body.date, body.start_time, body.end_time, body.reason
    )
    return OperationResult(**result)


@router.delete("/blocked-times/{block_id}", response_model=UnblockResponse)
async def unblock_time_slot(
    block_id: str,
    service: AvailabilityService = Depends(get_availability_service),
):
    changed = await service.unblock_time_slot(block_id)
    return UnblockResponse(changed=changed)


@router.get("/trainers/{trainer_id}/availability/range", response_model=List[DayAvailabilityResponse])
async def get_availability_for_range(
    trainer_id: str,
    start_date: str = Query(..., description="First day, YYYY-MM-DD"),
    end_date: str = Query(..., description="Last day (inclusive), YYYY-MM-DD"),
    service_id: Optional[str] = None,
    service: AvailabilityService = Depends(get_availability_service),
):
    days = await service.get_availability_for_range(trainer_id, start_date, end_date, service_id)
    return [DayAvailabilityResponse.model_validate(d) for d in days]


@router.get("/trainers/{trainer_id}/availability/next", response_model=List[NextAvailableSlotResponse])
async def get_next_available_slots(
    trainer_id: str,
    count: int = Query(3, ge=1, le=31),
    service_id: Optional[str] = None,
    service: AvailabilityService = Depends(get_availability_service),
):
    slots = await service.get_next_available_slots(trainer_id, count, service_id)
    return [NextAvailableSlotResponse.model_validate(s) for s in slots]


@router.get("/trainers/{trainer_id}/availability/date/{date}", response_model=List[DaySlotResponse])
async def get_availability_for_date(
    trainer_id: str,
    date: str,
    service_id: Optional[str] = None,
    service: AvailabilityService = Depends(get_availability_service),
):
    slots = await service.get_availability_for_date(trainer_id, date, service_id)
    return [DaySlotResponse.model_validate(s) for s in slots]


@router.get("/services/{service_id}/availability", response_model=ServiceAvailabilityResponse)
async def get_service_availability(
    service_id: str,
    service: AvailabilityService = Depends(get_availability_service),
):
    result = await service.get_service_availability(service_id)
    return ServiceAvailabilityResponse.model_validate(result)
