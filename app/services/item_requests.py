import logging
from datetime import datetime
from typing import Callable, List

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.db.models.item_request import ItemRequest
from app.schemas.item_request import ItemRequestCreate
from app.services.users import UserService

logger = logging.getLogger(__name__)


class ItemRequestService:
    def __init__(self, db: Session, users: UserService, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self.users = users
        self.clock = clock

    def create_request(self, user_id: int, data: ItemRequestCreate) -> ItemRequest:
        requestor = self.users.get_user_by_id(user_id)

        request = ItemRequest(
            description=data.description,
            requestor_id=requestor.id,
            created=self.clock(),
        )
        self.db.add(request)
        self.db.commit()
        self.db.refresh(request)
        logger.info("Item request created", extra={"request_id": request.id, "user_id": user_id})
        return request

    def get_own_requests(self, user_id: int) -> List[ItemRequest]:
        requestor = self.users.get_user_by_id(user_id)
        return (
            self.db.query(ItemRequest)
            .filter(ItemRequest.requestor_id == requestor.id)
            .order_by(ItemRequest.created.desc(), ItemRequest.id.desc())
            .all()
        )

    def get_other_requests(self, user_id: int, offset: int, size: int) -> List[ItemRequest]:
        """Other users' requests, newest first, the page of ``size`` rows containing ``offset``."""
        user = self.users.get_user_by_id(user_id)

        if offset < 0 or size <= 0:
            logger.warning("Bad pagination from=%s size=%s", offset, size)
            raise ValidationError("Pagination parameters must be from >= 0 and size > 0")

        # pages are aligned to size: from=5, size=10 is still the first page
        page = offset // size
        return (
            self.db.query(ItemRequest)
            .filter(ItemRequest.requestor_id != user.id)
            .order_by(ItemRequest.created.desc(), ItemRequest.id.desc())
            .offset(page * size)
            .limit(size)
            .all()
        )

    def get_request(self, user_id: int, request_id: int) -> ItemRequest:
        self.users.get_user_by_id(user_id)

        request = self.db.query(ItemRequest).filter(ItemRequest.id == request_id).first()
        if not request:
            logger.warning("Item request not found", extra={"request_id": request_id})
            raise NotFoundError(f"Item request with id {request_id} not found")
        return request
