# app/api/routes/items.py

from fastapi import APIRouter, Depends, Query
from typing import Optional

from app.api.deps import get_item_service
from app.core.security import get_current_user_id
from app.schemas.comment import CommentCreate, CommentResponse
from app.schemas.item import ItemCreate, ItemDetailResponse, ItemResponse, ItemUpdate
from app.services.items import ItemService


router = APIRouter(prefix="/items", tags=["items"])

# Owner lists an item

@router.post("", response_model=ItemResponse)
def create_item(
    item_data: ItemCreate,
    service: ItemService = Depends(get_item_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.create_item(current_user_id, item_data)


# Owner updates their item

@router.patch("/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: int,
    update_data: ItemUpdate,
    service: ItemService = Depends(get_item_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.update_item(current_user_id, item_id, update_data)


# Search available items by name/description

@router.get("/search", response_model=list[ItemResponse])
def search_items(
    text: Optional[str] = Query(None),
    service: ItemService = Depends(get_item_service),
):
    return service.search_items(text)


# Owner views their items

@router.get("", response_model=list[ItemDetailResponse])
def get_my_items(
    service: ItemService = Depends(get_item_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.get_owner_items(current_user_id)


# Item page with comments (and bookings for the owner)

@router.get("/{item_id}", response_model=ItemDetailResponse)
def get_item(
    item_id: int,
    service: ItemService = Depends(get_item_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.get_item_detail(current_user_id, item_id)


# Renter comments after a finished rental

@router.post("/{item_id}/comment", response_model=CommentResponse)
def create_comment(
    item_id: int,
    comment: CommentCreate,
    service: ItemService = Depends(get_item_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.create_comment(current_user_id, item_id, comment)
