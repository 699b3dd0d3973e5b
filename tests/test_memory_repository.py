import threading
from datetime import timedelta

from app.core.enums import BookingStatus
from app.core.exceptions import ValidationError
from app.db.models.booking import Booking
from conftest import NOW

DAY = timedelta(days=1)


def make(repo, item, booker, start, end, status=BookingStatus.WAITING):
    return repo.add(Booking(start=start, end=end, item=item, booker=booker, status=status))


def test_ids_are_assigned_in_order(memory_repo, drill, renter):
    a = make(memory_repo, drill, renter, NOW + DAY, NOW + 2 * DAY)
    b = make(memory_repo, drill, renter, NOW + DAY, NOW + 2 * DAY)

    assert (a.id, b.id) == (1, 2)
    assert memory_repo.get(2) is b
    assert memory_repo.get(3) is None


def test_lock_yields_none_for_unknown_id(memory_repo):
    with memory_repo.lock(42) as booking:
        assert booking is None


def test_last_and_next_only_count_approved(memory_repo, drill, renter):
    make(memory_repo, drill, renter, NOW - 3 * DAY, NOW - 2 * DAY, BookingStatus.APPROVED)
    last = make(memory_repo, drill, renter, NOW - 2 * DAY, NOW - DAY, BookingStatus.APPROVED)
    make(memory_repo, drill, renter, NOW - 2 * DAY, NOW - timedelta(hours=1), BookingStatus.REJECTED)
    make(memory_repo, drill, renter, NOW + timedelta(hours=1), NOW + DAY, BookingStatus.WAITING)
    nxt = make(memory_repo, drill, renter, NOW + DAY, NOW + 2 * DAY, BookingStatus.APPROVED)
    make(memory_repo, drill, renter, NOW + 3 * DAY, NOW + 4 * DAY, BookingStatus.APPROVED)

    assert memory_repo.find_last_for_item(drill.id, NOW) is last
    assert memory_repo.find_next_for_item(drill.id, NOW) is nxt


def test_current_booking_is_neither_last_nor_next(memory_repo, drill, renter):
    make(memory_repo, drill, renter, NOW - DAY, NOW + DAY, BookingStatus.APPROVED)

    assert memory_repo.find_last_for_item(drill.id, NOW) is None
    assert memory_repo.find_next_for_item(drill.id, NOW) is None


def test_has_completed_approved(memory_repo, drill, renter, stranger):
    make(memory_repo, drill, renter, NOW - 2 * DAY, NOW - DAY, BookingStatus.APPROVED)
    make(memory_repo, drill, stranger, NOW - 2 * DAY, NOW - DAY, BookingStatus.REJECTED)

    assert memory_repo.has_completed_approved(drill.id, renter.id, NOW)
    assert not memory_repo.has_completed_approved(drill.id, stranger.id, NOW)
    # the rental ends exactly now: not completed yet
    assert not memory_repo.has_completed_approved(drill.id, renter.id, NOW - DAY)


def test_concurrent_approvals_have_one_winner(booking_service, memory_repo, drill, renter):
    booking = make(memory_repo, drill, renter, NOW + DAY, NOW + 2 * DAY)

    barrier = threading.Barrier(8)
    outcomes = []
    outcomes_lock = threading.Lock()

    def decide(approved):
        barrier.wait()
        try:
            result = booking_service.approve_booking(2, booking.id, approved).status
        except ValidationError as exc:
            result = exc
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=decide, args=(i % 2 == 0,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    winners = [o for o in outcomes if isinstance(o, BookingStatus)]
    losers = [o for o in outcomes if isinstance(o, ValidationError)]
    assert len(winners) == 1
    assert len(losers) == 7
    assert memory_repo.get(booking.id).status == winners[0]
