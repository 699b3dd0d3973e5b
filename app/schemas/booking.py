from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional

from app.core.enums import BookingStatus
from app.schemas.user import UserResponse


# --- CREATE ---
# start/end may be missing here: the booking service reports that as a rule violation
class BookingCreate(BaseModel):
    item_id: int
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @field_validator("start", "end")
    @classmethod
    def to_local_naive(cls, v):
        # bookings are stored as naive local time
        if v is not None and v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v


class BookedItem(BaseModel):
    id: int
    name: str
    description: str
    available: bool
    owner_id: int
    request_id: Optional[int] = None

    class Config:
        from_attributes = True


# --- RESPONSE ---
class BookingResponse(BaseModel):
    id: int
    start: datetime
    end: datetime
    status: BookingStatus
    booker: UserResponse
    item: BookedItem

    class Config:
        from_attributes = True


# embedded in item responses
class BookingShort(BaseModel):
    id: int
    booker_id: int
    start: datetime
    end: datetime

    class Config:
        from_attributes = True
