# app/schemas/item_request.py
from pydantic import BaseModel, constr
from datetime import datetime
from typing import List

from app.schemas.item import ItemResponse


class ItemRequestCreate(BaseModel):
    description: constr(strip_whitespace=True, min_length=1)


class ItemRequestResponse(BaseModel):
    id: int
    description: str
    requestor_id: int
    created: datetime
    items: List[ItemResponse] = []

    class Config:
        from_attributes = True
