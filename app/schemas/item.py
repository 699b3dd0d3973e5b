# app/schemas/item.py

from pydantic import BaseModel, constr
from typing import List, Optional

from app.schemas.booking import BookingShort
from app.schemas.comment import CommentResponse


# Owner lists an item
class ItemCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=1)
    description: constr(strip_whitespace=True, min_length=1)
    available: bool
    request_id: Optional[int] = None


# Owner updates an item, only sent fields change
class ItemUpdate(BaseModel):
    name: Optional[constr(strip_whitespace=True, min_length=1)] = None
    description: Optional[constr(strip_whitespace=True, min_length=1)] = None
    available: Optional[bool] = None


class ItemResponse(BaseModel):
    id: int
    name: str
    description: str
    available: bool
    owner_id: int
    request_id: Optional[int] = None

    class Config:
        from_attributes = True


# Item page: bookings are only filled in for the owner
class ItemDetailResponse(ItemResponse):
    last_booking: Optional[BookingShort] = None
    next_booking: Optional[BookingShort] = None
    comments: List[CommentResponse] = []
