"""Pydantic schemas for the bookings API."""
from __future__ import annotations

import datetime as _dt
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field


class CreateBookingRequest(BaseModel):
    service_id: str = Field(..., min_length=1, max_length=128)
    client_id: str = Field(..., min_length=1, max_length=128)
    trainer_id: str = Field(..., min_length=1, max_length=128)
    booking_date: str = Field(..., description="ISO date of the session")
    start_time: str = Field(..., description="ISO date-time; bare HH:MM is placed on booking_date")
    end_time: str
    delivery_format_id: Optional[str] = Field(None, max_length=128)
    delivery_format_option_id: Optional[str] = Field(None, max_length=128)
    notes: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)


class CreateBookingResult(BaseModel):
    booking_id: str
    message: str
    status: str


class BookingResponse(BaseModel):
    id: str
    service_id: str
    service_title: str
    client_id: str
    client_name: str
    trainer_id: str
    trainer_name: str
    booking_date: Optional[_dt.date]
    start_time: Optional[_dt.datetime]
    end_time: Optional[_dt.datetime]
    status: str
    status_code: int
    price: Decimal
    notes: str = ""
    delivery_format_id: Optional[str] = None
    delivery_format_option_id: Optional[str] = None
    created_at: Optional[_dt.datetime] = None
    updated_at: Optional[_dt.datetime] = None


class UpdateBookingStatusRequest(BaseModel):
    status: Union[int, str] = Field(..., description="Status code (0-7) or name, e.g. Confirmed")
    notes: Optional[str] = None


class UpdateBookingStatusResponse(BaseModel):
    id: str
    status: str


class ConfirmationResponse(BaseModel):
    queued: bool
