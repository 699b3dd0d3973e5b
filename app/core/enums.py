from enum import Enum

from app.core.exceptions import ValidationError


class BookingStatus(str, Enum):
    """Stored booking status. WAITING is the only non-terminal value."""

    WAITING = "WAITING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class BookingState(str, Enum):
    """
    Filter accepted by the booking list endpoints.

    CURRENT/PAST/FUTURE are computed against "now"; WAITING/REJECTED
    filter on the stored status. APPROVED is deliberately not a member.
    """

    ALL = "ALL"
    CURRENT = "CURRENT"
    PAST = "PAST"
    FUTURE = "FUTURE"
    WAITING = "WAITING"
    REJECTED = "REJECTED"

    @classmethod
    def parse(cls, value: str | None) -> "BookingState":
        if value is None:
            return cls.ALL
        try:
            return cls(value.upper())
        except ValueError:
            raise ValidationError(f"Unknown state: {value}") from None
