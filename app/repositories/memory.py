"""
Process-local booking store.

Rows live in a dict keyed by id. Each booking id gets its own lock so that
the check-then-set of an approval is atomic without serialising unrelated
bookings. Bookings here are never flushed, so lookups go through the
``item`` / ``booker`` relationships rather than the foreign key columns.
"""
import itertools
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional

from app.core.enums import BookingStatus
from app.db.models.booking import Booking
from app.repositories.booking import BookingRepository


class InMemoryBookingRepository(BookingRepository):
    def __init__(self) -> None:
        self._rows: Dict[int, Booking] = {}
        self._locks: Dict[int, threading.Lock] = {}
        self._ids = itertools.count(1)
        self._guard = threading.Lock()

    def add(self, booking: Booking) -> Booking:
        with self._guard:
            booking.id = next(self._ids)
            self._rows[booking.id] = booking
            self._locks[booking.id] = threading.Lock()
        return booking

    def get(self, booking_id: int) -> Optional[Booking]:
        return self._rows.get(booking_id)

    @contextmanager
    def lock(self, booking_id: int) -> Iterator[Optional[Booking]]:
        with self._guard:
            row_lock = self._locks.get(booking_id)
        if row_lock is None:
            yield None
            return
        with row_lock:
            yield self._rows[booking_id]

    def save(self, booking: Booking) -> Booking:
        with self._guard:
            self._rows[booking.id] = booking
        return booking

    def _select(self, predicate: Callable[[Booking], bool]) -> List[Booking]:
        with self._guard:
            rows = list(self._rows.values())
        # rows are in insertion order and sorted() is stable, so ties stay id-ascending
        return sorted((b for b in rows if predicate(b)), key=lambda b: b.start, reverse=True)

    def find_by_booker(self, booker_id: int) -> List[Booking]:
        return self._select(lambda b: b.booker.id == booker_id)

    def find_current_by_booker(self, booker_id: int, now: datetime) -> List[Booking]:
        return self._select(lambda b: b.booker.id == booker_id and b.start <= now <= b.end)

    def find_past_by_booker(self, booker_id: int, now: datetime) -> List[Booking]:
        return self._select(lambda b: b.booker.id == booker_id and b.end < now)

    def find_future_by_booker(self, booker_id: int, now: datetime) -> List[Booking]:
        return self._select(lambda b: b.booker.id == booker_id and b.start > now)

    def find_by_booker_and_status(self, booker_id: int, status: BookingStatus) -> List[Booking]:
        return self._select(lambda b: b.booker.id == booker_id and b.status == status)

    def find_by_owner(self, owner_id: int) -> List[Booking]:
        return self._select(lambda b: b.item.owner_id == owner_id)

    def find_current_by_owner(self, owner_id: int, now: datetime) -> List[Booking]:
        return self._select(lambda b: b.item.owner_id == owner_id and b.start <= now <= b.end)

    def find_past_by_owner(self, owner_id: int, now: datetime) -> List[Booking]:
        return self._select(lambda b: b.item.owner_id == owner_id and b.end < now)

    def find_future_by_owner(self, owner_id: int, now: datetime) -> List[Booking]:
        return self._select(lambda b: b.item.owner_id == owner_id and b.start > now)

    def find_by_owner_and_status(self, owner_id: int, status: BookingStatus) -> List[Booking]:
        return self._select(lambda b: b.item.owner_id == owner_id and b.status == status)

    def find_last_for_item(self, item_id: int, now: datetime) -> Optional[Booking]:
        candidates = self._select(
            lambda b: b.item.id == item_id and b.end < now and b.status == BookingStatus.APPROVED
        )
        if not candidates:
            return None
        return max(candidates, key=lambda b: (b.end, b.id))

    def find_next_for_item(self, item_id: int, now: datetime) -> Optional[Booking]:
        candidates = self._select(
            lambda b: b.item.id == item_id and b.start > now and b.status == BookingStatus.APPROVED
        )
        if not candidates:
            return None
        return min(candidates, key=lambda b: (b.start, b.id))

    def has_completed_approved(self, item_id: int, booker_id: int, now: datetime) -> bool:
        return any(
            b.booker.id == booker_id and b.end < now and b.status == BookingStatus.APPROVED
            for b in self._select(lambda b: b.item.id == item_id)
        )
