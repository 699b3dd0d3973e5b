import logging
from datetime import datetime
from typing import Optional

from app.core.enums import BookingStatus
from app.core.exceptions import NotFoundError, ValidationError
from app.repositories.booking import ALREADY_DECIDED

logger = logging.getLogger(__name__)


def validate_item_can_be_booked(item, booker_id: int):
    """
    Validate that the item is open for booking by this user.

    An owner trying to book their own item gets a not-found error, the same
    as for an item they could not see.
    """
    if not item.available:
        logger.warning("Booking of unavailable item", extra={"item_id": item.id, "user_id": booker_id})
        raise ValidationError(f"Item with id {item.id} is not available for booking")

    if item.owner_id == booker_id:
        logger.warning("Owner tried to book own item", extra={"item_id": item.id, "user_id": booker_id})
        raise NotFoundError("Owner cannot book own item")


def validate_booking_dates(start: Optional[datetime], end: Optional[datetime], now: datetime):
    """Validate the rental window. Checks run in order, first failure wins."""
    if start is None:
        raise ValidationError("Booking start must not be empty")

    if end is None:
        raise ValidationError("Booking end must not be empty")

    if start < now:
        logger.warning("Booking start in the past: %s", start.isoformat())
        raise ValidationError("Booking start must not be in the past")

    if end < start:
        logger.warning("Booking end %s before start %s", end.isoformat(), start.isoformat())
        raise ValidationError("Booking end must not be before start")

    if start == end:
        raise ValidationError("Booking start and end must not be equal")


def validate_booking_can_be_decided(booking, owner_id: int):
    """Validate that the user may approve/reject and that nobody did yet."""
    if booking.item.owner_id != owner_id:
        logger.warning("Non-owner tried to decide booking", extra={"booking_id": booking.id, "user_id": owner_id})
        raise ValidationError(f"User with id {owner_id} is not the owner of the item")

    if booking.status != BookingStatus.WAITING:
        logger.warning(
            "Booking already decided",
            extra={"booking_id": booking.id, "status": booking.status.value},
        )
        raise ValidationError(ALREADY_DECIDED)


def validate_booking_visible_to(booking, user_id: int):
    """Only the booker and the item owner may see a booking."""
    if booking.booker.id != user_id and booking.item.owner_id != user_id:
        logger.warning("Booking access denied", extra={"booking_id": booking.id, "user_id": user_id})
        raise NotFoundError(f"User with id {user_id} has no access to booking with id {booking.id}")
