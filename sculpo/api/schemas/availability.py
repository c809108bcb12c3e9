"""Pydantic schemas for the trainer availability API."""
from __future__ import annotations

import datetime as _dt
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class WeeklyAvailabilityRequest(BaseModel):
    """One day of the weekly template. day_of_week: 0 = Sunday ... 6 = Saturday."""
    day_of_week: int
    start_time: str = Field(..., max_length=8)
    end_time: str = Field(..., max_length=8)
    is_available: bool = True


class WeeklyScheduleRequest(BaseModel):
    entries: List[WeeklyAvailabilityRequest] = Field(..., min_length=1, max_length=7)


class WeeklyAvailabilityResponse(BaseModel):
    id: str
    trainer_id: str
    day_of_week: int
    start_time: str
    end_time: str
    is_available: bool

    class Config:
        from_attributes = True


class BlockTimeRequest(BaseModel):
    date: str = Field(..., description="ISO date (YYYY-MM-DD) or date-time")
    start_time: str = Field(..., max_length=8)
    end_time: str = Field(..., max_length=8)
    reason: Optional[str] = None


class BlockedTimeResponse(BaseModel):
    id: UUID
    trainer_id: str
    date: _dt.date
    start_time: str
    end_time: str
    reason: str
    is_active: bool
    created_at: Optional[_dt.datetime] = None

    class Config:
        from_attributes = True


class OperationResult(BaseModel):
    success: bool
    message: str
    id: Optional[str] = None
    updated: Optional[int] = None


class UnblockResponse(BaseModel):
    success: bool = True
    changed: bool


class TrainerAvailabilityResponse(BaseModel):
    weekly_availability: List[WeeklyAvailabilityResponse]
    blocked_times: List[BlockedTimeResponse]


class TimeSlotResponse(BaseModel):
    start_time: str
    end_time: str
    is_available: bool
    reason: Optional[str] = None
    booking_id: Optional[str] = None

    model_config = {"from_attributes": True}


class DayAvailabilityResponse(BaseModel):
    date: _dt.date
    available_slots: List[TimeSlotResponse]
    busy_slots: List[TimeSlotResponse]

    model_config = {"from_attributes": True}


class NextAvailableSlotResponse(BaseModel):
    date: _dt.date
    start_time: str
    end_time: str
    formatted_date: str
    formatted_time: str

    model_config = {"from_attributes": True}


class DaySlotResponse(BaseModel):
    time: str
    available: bool
    reason: Optional[str] = None

    model_config = {"from_attributes": True}


class ServiceAvailabilityResponse(BaseModel):
    next_available_slots: List[NextAvailableSlotResponse]
    time_slots: List[DaySlotResponse]
    selected_date: _dt.date

    model_config = {"from_attributes": True}
