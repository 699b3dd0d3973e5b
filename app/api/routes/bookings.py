from fastapi import APIRouter, Depends, Query

from app.api.deps import get_booking_service
from app.core.security import get_current_user_id
from app.schemas.booking import BookingCreate, BookingResponse
from app.services.bookings import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])

# Renter requests a booking

@router.post("", response_model=BookingResponse)
def create_booking(
    booking: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.create_booking(current_user_id, booking)


# Owner approves or rejects

@router.patch("/{booking_id}", response_model=BookingResponse)
def approve_booking(
    booking_id: int,
    approved: bool = Query(...),
    service: BookingService = Depends(get_booking_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.approve_booking(current_user_id, booking_id, approved)


# Renter views their bookings

@router.get("", response_model=list[BookingResponse])
def user_bookings(
    state: str = Query("ALL", description="ALL, CURRENT, PAST, FUTURE, WAITING, REJECTED"),
    service: BookingService = Depends(get_booking_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.get_user_bookings(current_user_id, state)


# Owner views bookings of their items

@router.get("/owner", response_model=list[BookingResponse])
def owner_bookings(
    state: str = Query("ALL", description="ALL, CURRENT, PAST, FUTURE, WAITING, REJECTED"),
    service: BookingService = Depends(get_booking_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.get_owner_bookings(current_user_id, state)


# Booker or owner views a single booking

@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.get_booking_by_id(current_user_id, booking_id)
