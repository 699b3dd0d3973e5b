"""
Booking store contract and its SQLAlchemy implementation.

Every list query returns bookings ordered by ``start`` descending; bookings
that share a start keep insertion (id ascending) order. Time-window queries
take ``now`` from the caller so one request classifies against one instant:

    CURRENT  start <= now <= end
    PAST     end < now
    FUTURE   start > now
"""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import ContextManager, Iterator, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.enums import BookingStatus
from app.core.exceptions import ValidationError
from app.db.models.booking import Booking
from app.db.models.item import Item

logger = logging.getLogger(__name__)

ALREADY_DECIDED = "Booking has already been approved or rejected"


class BookingRepository(ABC):
    @abstractmethod
    def add(self, booking: Booking) -> Booking:
        """Persist a new booking and assign its id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: int) -> Optional[Booking]:
        raise NotImplementedError

    @abstractmethod
    def lock(self, booking_id: int) -> ContextManager[Optional[Booking]]:
        """
        Hold the per-booking lock for the duration of the ``with`` block.
        Yields the booking, or None when it does not exist.
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, booking: Booking) -> Booking:
        raise NotImplementedError

    # booker-scoped

    @abstractmethod
    def find_by_booker(self, booker_id: int) -> List[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_current_by_booker(self, booker_id: int, now: datetime) -> List[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_past_by_booker(self, booker_id: int, now: datetime) -> List[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_future_by_booker(self, booker_id: int, now: datetime) -> List[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_by_booker_and_status(self, booker_id: int, status: BookingStatus) -> List[Booking]:
        raise NotImplementedError

    # owner-scoped (bookings of items the user owns)

    @abstractmethod
    def find_by_owner(self, owner_id: int) -> List[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_current_by_owner(self, owner_id: int, now: datetime) -> List[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_past_by_owner(self, owner_id: int, now: datetime) -> List[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_future_by_owner(self, owner_id: int, now: datetime) -> List[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_by_owner_and_status(self, owner_id: int, status: BookingStatus) -> List[Booking]:
        raise NotImplementedError

    # item helpers

    @abstractmethod
    def find_last_for_item(self, item_id: int, now: datetime) -> Optional[Booking]:
        """Latest APPROVED booking of the item that ended before ``now``."""
        raise NotImplementedError

    @abstractmethod
    def find_next_for_item(self, item_id: int, now: datetime) -> Optional[Booking]:
        """Soonest APPROVED booking of the item that starts after ``now``."""
        raise NotImplementedError

    @abstractmethod
    def has_completed_approved(self, item_id: int, booker_id: int, now: datetime) -> bool:
        """True if the booker rented the item and the rental is over."""
        raise NotImplementedError


class SqlAlchemyBookingRepository(BookingRepository):
    def __init__(self, db: Session):
        self.db = db

    def add(self, booking: Booking) -> Booking:
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def get(self, booking_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    @contextmanager
    def lock(self, booking_id: int) -> Iterator[Optional[Booking]]:
        booking = (
            self.db.query(Booking)
            .filter(Booking.id == booking_id)
            .populate_existing()
            .with_for_update(of=Booking)
            .first()
        )
        try:
            yield booking
        except Exception:
            self.db.rollback()
            raise

    def save(self, booking: Booking) -> Booking:
        try:
            self.db.commit()
        except StaleDataError:
            # someone else decided this booking between our read and write
            self.db.rollback()
            logger.warning("Concurrent update of booking", extra={"booking_id": booking.id})
            raise ValidationError(ALREADY_DECIDED) from None
        self.db.refresh(booking)
        return booking

    def _by_booker(self, booker_id: int):
        return self.db.query(Booking).filter(Booking.booker_id == booker_id)

    def _by_owner(self, owner_id: int):
        return (
            self.db.query(Booking)
            .join(Item, Booking.item_id == Item.id)
            .filter(Item.owner_id == owner_id)
        )

    @staticmethod
    def _ordered(q) -> List[Booking]:
        return q.order_by(Booking.start.desc(), Booking.id.asc()).all()

    def find_by_booker(self, booker_id: int) -> List[Booking]:
        return self._ordered(self._by_booker(booker_id))

    def find_current_by_booker(self, booker_id: int, now: datetime) -> List[Booking]:
        return self._ordered(self._by_booker(booker_id).filter(Booking.start <= now, Booking.end >= now))

    def find_past_by_booker(self, booker_id: int, now: datetime) -> List[Booking]:
        return self._ordered(self._by_booker(booker_id).filter(Booking.end < now))

    def find_future_by_booker(self, booker_id: int, now: datetime) -> List[Booking]:
        return self._ordered(self._by_booker(booker_id).filter(Booking.start > now))

    def find_by_booker_and_status(self, booker_id: int, status: BookingStatus) -> List[Booking]:
        return self._ordered(self._by_booker(booker_id).filter(Booking.status == status))

    def find_by_owner(self, owner_id: int) -> List[Booking]:
        return self._ordered(self._by_owner(owner_id))

    def find_current_by_owner(self, owner_id: int, now: datetime) -> List[Booking]:
        return self._ordered(self._by_owner(owner_id).filter(Booking.start <= now, Booking.end >= now))

    def find_past_by_owner(self, owner_id: int, now: datetime) -> List[Booking]:
        return self._ordered(self._by_owner(owner_id).filter(Booking.end < now))

    def find_future_by_owner(self, owner_id: int, now: datetime) -> List[Booking]:
        return self._ordered(self._by_owner(owner_id).filter(Booking.start > now))

    def find_by_owner_and_status(self, owner_id: int, status: BookingStatus) -> List[Booking]:
        return self._ordered(self._by_owner(owner_id).filter(Booking.status == status))

    def find_last_for_item(self, item_id: int, now: datetime) -> Optional[Booking]:
        return (
            self.db.query(Booking)
            .filter(
                Booking.item_id == item_id,
                Booking.end < now,
                Booking.status == BookingStatus.APPROVED,
            )
            .order_by(Booking.end.desc(), Booking.id.desc())
            .first()
        )

    def find_next_for_item(self, item_id: int, now: datetime) -> Optional[Booking]:
        return (
            self.db.query(Booking)
            .filter(
                Booking.item_id == item_id,
                Booking.start > now,
                Booking.status == BookingStatus.APPROVED,
            )
            .order_by(Booking.start.asc(), Booking.id.asc())
            .first()
        )

    def has_completed_approved(self, item_id: int, booker_id: int, now: datetime) -> bool:
        q = self.db.query(Booking.id).filter(
            Booking.item_id == item_id,
            Booking.booker_id == booker_id,
            Booking.end < now,
            Booking.status == BookingStatus.APPROVED,
        )
        return self.db.query(q.exists()).scalar()
