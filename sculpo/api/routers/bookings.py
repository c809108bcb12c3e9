"""Bookings API: create, read, status updates and confirmation emails."""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from sculpo.api.dependencies import get_booking_service
from sculpo.api.schemas.bookings import (
    BookingResponse,
    ConfirmationResponse,
    CreateBookingRequest,
    CreateBookingResult,
    UpdateBookingStatusRequest,
    UpdateBookingStatusResponse,
)
from sculpo.services import BookingService
from sculpo.services.booking_service import coerce_status
from sculpo.services.types import BookingView, CreateBookingDto

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


def _to_response(view: BookingView) -> BookingResponse:
    return BookingResponse(
        id=view.id,
        service_id=view.service_id,
        service_title=view.service_title,
        client_id=view.client_id,
        client_name=view.client_name,
        trainer_id=view.trainer_id,
        trainer_name=view.trainer_name,
        booking_date=view.booking_date,
        start_time=view.start_time,
        end_time=view.end_time,
        status=view.status.label,
        status_code=int(view.status),
        price=view.price,
        notes=view.notes,
        delivery_format_id=view.delivery_format_id,
        delivery_format_option_id=view.delivery_format_option_id,
        created_at=view.created_at,
        updated_at=view.updated_at,
    )


@router.post("/bookings", response_model=CreateBookingResult, status_code=201)
async def create_booking(
    body: CreateBookingRequest,
    service: BookingService = Depends(get_booking_service),
):
    result = await service.create_booking(CreateBookingDto(**body.model_dump()))
    return CreateBookingResult(booking_id=result.booking_id, message=result.message, status=result.status)


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
):
    view = await service.get_booking_by_id(booking_id)
    if view is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _to_response(view)


@router.get("/users/{user_id}/bookings", response_model=List[BookingResponse])
async def list_user_bookings(
    user_id: str,
    service: BookingService = Depends(get_booking_service),
):
    return [_to_response(v) for v in await service.get_bookings_by_user_id(user_id)]


@router.patch("/bookings/{booking_id}/status", response_model=UpdateBookingStatusResponse)
async def update_booking_status(
    booking_id: str,
    body: UpdateBookingStatusRequest,
    service: BookingService = Depends(get_booking_service),
):
    status = coerce_status(body.status)
    updated = await service.update_booking_status(booking_id, status, body.notes)
    if not updated:
        raise HTTPException(status_code=404, detail="Booking not found")
    return UpdateBookingStatusResponse(id=booking_id, status=status.label)


@router.post("/bookings/{booking_id}/confirmation", response_model=ConfirmationResponse)
async def send_booking_confirmation(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
):
    return ConfirmationResponse(queued=await service.send_booking_confirmation(booking_id))
