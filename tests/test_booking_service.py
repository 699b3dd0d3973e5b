"""
Booking lifecycle against the in-memory store.
"""
import re
from datetime import timedelta

import pytest

from app.core.enums import BookingStatus
from app.core.exceptions import NotFoundError, ValidationError
from app.db.models.booking import Booking
from app.schemas.booking import BookingCreate
from conftest import NOW

DAY = timedelta(days=1)


def draft(start=NOW + DAY, end=NOW + 2 * DAY, item_id=10):
    return BookingCreate(item_id=item_id, start=start, end=end)


def stored(repo, item, booker, start, end, status=BookingStatus.WAITING):
    # bypasses validation so tests can seed past and current bookings
    return repo.add(Booking(start=start, end=end, item=item, booker=booker, status=status))


# --- create ---

def test_create_booking_is_waiting(booking_service):
    booking = booking_service.create_booking(1, draft())

    assert booking.id is not None
    assert booking.status == BookingStatus.WAITING
    assert booking.booker.id == 1
    assert booking.item.id == 10
    assert booking.start == NOW + DAY
    assert booking.end == NOW + 2 * DAY


def test_owner_cannot_book_own_item(booking_service):
    with pytest.raises(NotFoundError, match="cannot book own item"):
        booking_service.create_booking(2, draft())


def test_unavailable_item_is_rejected(booking_service, drill):
    drill.available = False

    with pytest.raises(ValidationError, match="not available"):
        booking_service.create_booking(1, draft())


def test_unavailable_check_runs_before_owner_check(booking_service, drill):
    drill.available = False

    with pytest.raises(ValidationError, match="not available"):
        booking_service.create_booking(2, draft())


def test_unknown_booker(booking_service):
    with pytest.raises(NotFoundError, match="User with id 99"):
        booking_service.create_booking(99, draft())


def test_unknown_item(booking_service):
    with pytest.raises(NotFoundError, match="Item with id 77"):
        booking_service.create_booking(1, draft(item_id=77))


@pytest.mark.parametrize(
    "start, end, message",
    [
        (None, NOW + DAY, "start must not be empty"),
        (NOW + DAY, None, "end must not be empty"),
        (None, None, "start must not be empty"),
        (NOW - DAY, NOW + DAY, "start must not be in the past"),
        (NOW - DAY, NOW - 2 * DAY, "start must not be in the past"),
        (NOW + 2 * DAY, NOW + DAY, "end must not be before start"),
        (NOW + DAY, NOW + DAY, "must not be equal"),
    ],
)
def test_invalid_dates(booking_service, start, end, message):
    with pytest.raises(ValidationError, match=message):
        booking_service.create_booking(1, draft(start=start, end=end))


def test_start_exactly_now_is_accepted(booking_service):
    booking = booking_service.create_booking(1, draft(start=NOW, end=NOW + DAY))
    assert booking.status == BookingStatus.WAITING


def test_failed_creation_stores_nothing(booking_service, memory_repo):
    with pytest.raises(ValidationError):
        booking_service.create_booking(1, draft(start=NOW - DAY))

    assert memory_repo.find_by_booker(1) == []


# --- approve / reject ---

def test_approve_then_approve_again(booking_service):
    booking = booking_service.create_booking(1, draft())

    approved = booking_service.approve_booking(2, booking.id, True)
    assert approved.status == BookingStatus.APPROVED

    with pytest.raises(ValidationError, match="already been approved or rejected"):
        booking_service.approve_booking(2, booking.id, True)


def test_reject_is_terminal(booking_service):
    booking = booking_service.create_booking(1, draft())

    rejected = booking_service.approve_booking(2, booking.id, False)
    assert rejected.status == BookingStatus.REJECTED

    with pytest.raises(ValidationError, match="already been approved or rejected"):
        booking_service.approve_booking(2, booking.id, True)
    assert booking_service.get_booking_by_id(2, booking.id).status == BookingStatus.REJECTED


def test_non_owner_cannot_approve(booking_service):
    booking = booking_service.create_booking(1, draft())

    with pytest.raises(ValidationError, match="not the owner"):
        booking_service.approve_booking(3, booking.id, True)
    assert booking_service.get_booking_by_id(1, booking.id).status == BookingStatus.WAITING


def test_booker_cannot_approve_own_request(booking_service):
    booking = booking_service.create_booking(1, draft())

    with pytest.raises(ValidationError, match="not the owner"):
        booking_service.approve_booking(1, booking.id, True)


def test_approve_missing_booking(booking_service):
    with pytest.raises(NotFoundError, match="Booking with id 404"):
        booking_service.approve_booking(2, 404, True)


# --- get by id ---

def test_booker_and_owner_can_view(booking_service):
    booking = booking_service.create_booking(1, draft())

    assert booking_service.get_booking_by_id(1, booking.id) is booking
    assert booking_service.get_booking_by_id(2, booking.id) is booking


def test_stranger_cannot_view(booking_service):
    booking = booking_service.create_booking(1, draft())

    with pytest.raises(NotFoundError):
        booking_service.get_booking_by_id(3, booking.id)


def test_view_missing_booking(booking_service):
    with pytest.raises(NotFoundError):
        booking_service.get_booking_by_id(1, 12345)


# --- lists ---

@pytest.fixture
def timeline(memory_repo, drill, renter):
    past = stored(memory_repo, drill, renter, NOW - 2 * DAY, NOW - DAY, BookingStatus.APPROVED)
    current = stored(memory_repo, drill, renter, NOW - DAY, NOW + DAY, BookingStatus.APPROVED)
    future = stored(memory_repo, drill, renter, NOW + DAY, NOW + 2 * DAY)
    return past, current, future


def test_time_classification_for_booker(booking_service, timeline):
    past, current, future = timeline

    assert booking_service.get_user_bookings(1, "PAST") == [past]
    assert booking_service.get_user_bookings(1, "CURRENT") == [current]
    assert booking_service.get_user_bookings(1, "FUTURE") == [future]
    assert booking_service.get_user_bookings(1, "ALL") == [future, current, past]


def test_time_classification_for_owner(booking_service, timeline):
    past, current, future = timeline

    assert booking_service.get_owner_bookings(2, "PAST") == [past]
    assert booking_service.get_owner_bookings(2, "CURRENT") == [current]
    assert booking_service.get_owner_bookings(2, "FUTURE") == [future]
    assert booking_service.get_owner_bookings(2, "ALL") == [future, current, past]


def test_owner_sees_nothing_as_booker(booking_service, timeline):
    assert booking_service.get_user_bookings(2, "ALL") == []
    assert booking_service.get_owner_bookings(1, "ALL") == []


def test_status_filters(booking_service, timeline, memory_repo, drill, renter):
    rejected = stored(memory_repo, drill, renter, NOW + 3 * DAY, NOW + 4 * DAY, BookingStatus.REJECTED)
    _, _, future = timeline

    assert booking_service.get_user_bookings(1, "WAITING") == [future]
    assert booking_service.get_user_bookings(1, "REJECTED") == [rejected]
    assert booking_service.get_owner_bookings(2, "WAITING") == [future]
    assert booking_service.get_owner_bookings(2, "REJECTED") == [rejected]


def test_state_is_case_insensitive(booking_service, timeline):
    _, current, _ = timeline

    assert booking_service.get_user_bookings(1, "current") == [current]
    assert booking_service.get_owner_bookings(2, "Current") == [current]


def test_missing_state_means_all(booking_service, timeline):
    assert len(booking_service.get_user_bookings(1, None)) == 3


@pytest.mark.parametrize(
    "state",
    ["APPROVED", "approved", "UNSUPPORTED_STATUS", "", "PENDING", " ALL", "all\n", "\tPAST "],
)
def test_unknown_state(booking_service, state):
    with pytest.raises(ValidationError, match=re.escape(f"Unknown state: {state}")):
        booking_service.get_user_bookings(1, state)
    with pytest.raises(ValidationError, match=re.escape(f"Unknown state: {state}")):
        booking_service.get_owner_bookings(2, state)


def test_lists_need_existing_user(booking_service):
    with pytest.raises(NotFoundError):
        booking_service.get_user_bookings(99, "ALL")
    with pytest.raises(NotFoundError):
        booking_service.get_owner_bookings(99, "ALL")


def test_current_window_is_inclusive(booking_service, memory_repo, drill, renter):
    starts_now = stored(memory_repo, drill, renter, NOW, NOW + DAY)
    ends_now = stored(memory_repo, drill, renter, NOW - DAY, NOW)

    assert booking_service.get_user_bookings(1, "CURRENT") == [starts_now, ends_now]
    assert booking_service.get_user_bookings(1, "PAST") == []
    assert booking_service.get_user_bookings(1, "FUTURE") == []


def test_windows_partition_all(booking_service, memory_repo, drill, renter):
    offsets = [-5, -3, -1, 0, 1, 2, 4]
    for a in offsets:
        for length in (1, 3):
            stored(memory_repo, drill, renter, NOW + a * DAY, NOW + (a + length) * DAY)

    everything = booking_service.get_user_bookings(1, "ALL")
    parts = [booking_service.get_user_bookings(1, s) for s in ("PAST", "CURRENT", "FUTURE")]

    ids = [b.id for part in parts for b in part]
    assert sorted(ids) == sorted(b.id for b in everything)
    assert len(ids) == len(set(ids))


def test_lists_ordered_by_start_desc_with_stable_ties(booking_service, memory_repo, drill, renter):
    first = stored(memory_repo, drill, renter, NOW + DAY, NOW + 2 * DAY)
    later = stored(memory_repo, drill, renter, NOW + 3 * DAY, NOW + 4 * DAY)
    tie = stored(memory_repo, drill, renter, NOW + DAY, NOW + 5 * DAY)

    assert booking_service.get_user_bookings(1, "ALL") == [later, first, tie]


def test_classification_follows_the_clock(booking_service, clock):
    booking = booking_service.create_booking(1, draft())
    assert booking_service.get_user_bookings(1, "FUTURE") == [booking]

    clock.now = NOW + 3 * DAY
    assert booking_service.get_user_bookings(1, "FUTURE") == []
    assert booking_service.get_user_bookings(1, "PAST") == [booking]
