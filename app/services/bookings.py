"""
Booking lifecycle.

A booking is created WAITING and the item owner moves it once to APPROVED
or REJECTED. Lists are classified against a single "now" per call.
"""
import logging
from datetime import datetime
from typing import Callable, Dict, List, Protocol

from app.core.enums import BookingState, BookingStatus
from app.core.exceptions import NotFoundError
from app.db.models.booking import Booking
from app.db.models.item import Item
from app.db.models.user import User
from app.repositories.booking import BookingRepository
from app.schemas.booking import BookingCreate
from app.services.validators import (
    validate_booking_can_be_decided,
    validate_booking_dates,
    validate_booking_visible_to,
    validate_item_can_be_booked,
)

logger = logging.getLogger(__name__)


class UserDirectory(Protocol):
    def get_user_by_id(self, user_id: int) -> User: ...


class ItemCatalog(Protocol):
    def get_item_by_id(self, item_id: int) -> Item: ...


class BookingService:
    def __init__(
        self,
        bookings: BookingRepository,
        users: UserDirectory,
        items: ItemCatalog,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.bookings = bookings
        self.users = users
        self.items = items
        self.clock = clock

    def create_booking(self, user_id: int, draft: BookingCreate) -> Booking:
        logger.info("Creating booking", extra={"user_id": user_id, "item_id": draft.item_id})

        booker = self.users.get_user_by_id(user_id)
        item = self.items.get_item_by_id(draft.item_id)

        validate_item_can_be_booked(item, user_id)
        validate_booking_dates(draft.start, draft.end, self.clock())

        booking = Booking(
            start=draft.start,
            end=draft.end,
            item=item,
            booker=booker,
            status=BookingStatus.WAITING,
        )
        booking = self.bookings.add(booking)
        logger.info("Booking created", extra={"booking_id": booking.id, "user_id": user_id})
        return booking

    def approve_booking(self, user_id: int, booking_id: int, approved: bool) -> Booking:
        logger.info(
            "Deciding booking approved=%s", approved,
            extra={"booking_id": booking_id, "user_id": user_id},
        )

        with self.bookings.lock(booking_id) as booking:
            if booking is None:
                raise NotFoundError(f"Booking with id {booking_id} not found")

            validate_booking_can_be_decided(booking, user_id)

            booking.status = BookingStatus.APPROVED if approved else BookingStatus.REJECTED
            booking = self.bookings.save(booking)

        logger.info("Booking decided", extra={"booking_id": booking_id, "status": booking.status.value})
        return booking

    def get_booking_by_id(self, user_id: int, booking_id: int) -> Booking:
        booking = self.bookings.get(booking_id)
        if booking is None:
            logger.warning("Booking not found", extra={"booking_id": booking_id})
            raise NotFoundError(f"Booking with id {booking_id} not found")

        validate_booking_visible_to(booking, user_id)
        return booking

    def get_user_bookings(self, user_id: int, state: str) -> List[Booking]:
        """Bookings the user made, filtered by ``state``."""
        user = self.users.get_user_by_id(user_id)
        state = BookingState.parse(state)
        now = self.clock()

        queries: Dict[BookingState, Callable[[], List[Booking]]] = {
            BookingState.ALL: lambda: self.bookings.find_by_booker(user.id),
            BookingState.CURRENT: lambda: self.bookings.find_current_by_booker(user.id, now),
            BookingState.PAST: lambda: self.bookings.find_past_by_booker(user.id, now),
            BookingState.FUTURE: lambda: self.bookings.find_future_by_booker(user.id, now),
            BookingState.WAITING: lambda: self.bookings.find_by_booker_and_status(user.id, BookingStatus.WAITING),
            BookingState.REJECTED: lambda: self.bookings.find_by_booker_and_status(user.id, BookingStatus.REJECTED),
        }
        bookings = queries[state]()
        logger.debug("Found %d bookings", len(bookings), extra={"user_id": user_id, "state": state.value})
        return bookings

    def get_owner_bookings(self, user_id: int, state: str) -> List[Booking]:
        """Bookings of the items the user owns, filtered by ``state``."""
        owner = self.users.get_user_by_id(user_id)
        state = BookingState.parse(state)
        now = self.clock()

        queries: Dict[BookingState, Callable[[], List[Booking]]] = {
            BookingState.ALL: lambda: self.bookings.find_by_owner(owner.id),
            BookingState.CURRENT: lambda: self.bookings.find_current_by_owner(owner.id, now),
            BookingState.PAST: lambda: self.bookings.find_past_by_owner(owner.id, now),
            BookingState.FUTURE: lambda: self.bookings.find_future_by_owner(owner.id, now),
            BookingState.WAITING: lambda: self.bookings.find_by_owner_and_status(owner.id, BookingStatus.WAITING),
            BookingState.REJECTED: lambda: self.bookings.find_by_owner_and_status(owner.id, BookingStatus.REJECTED),
        }
        bookings = queries[state]()
        logger.debug("Found %d owner bookings", len(bookings), extra={"user_id": user_id, "state": state.value})
        return bookings
