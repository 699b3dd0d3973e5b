from fastapi import APIRouter, Depends, Query

from app.api.deps import get_item_request_service
from app.core.config import settings
from app.core.security import get_current_user_id
from app.schemas.item_request import ItemRequestCreate, ItemRequestResponse
from app.services.item_requests import ItemRequestService

router = APIRouter(prefix="/requests", tags=["requests"])


@router.post("", response_model=ItemRequestResponse)
def create_request(
    request: ItemRequestCreate,
    service: ItemRequestService = Depends(get_item_request_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.create_request(current_user_id, request)


@router.get("", response_model=list[ItemRequestResponse])
def my_requests(
    service: ItemRequestService = Depends(get_item_request_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.get_own_requests(current_user_id)


@router.get("/all", response_model=list[ItemRequestResponse])
def other_requests(
    offset: int = Query(0, alias="from"),
    size: int = Query(settings.REQUESTS_PAGE_SIZE),
    service: ItemRequestService = Depends(get_item_request_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.get_other_requests(current_user_id, offset, size)


@router.get("/{request_id}", response_model=ItemRequestResponse)
def get_request(
    request_id: int,
    service: ItemRequestService = Depends(get_item_request_service),
    current_user_id: int = Depends(get_current_user_id),
):
    return service.get_request(current_user_id, request_id)
