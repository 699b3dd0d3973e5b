import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.db.models.comment import Comment
from app.db.models.item import Item
from app.db.models.item_request import ItemRequest
from app.repositories.booking import BookingRepository
from app.schemas.booking import BookingShort
from app.schemas.comment import CommentCreate, CommentResponse
from app.schemas.item import ItemCreate, ItemDetailResponse, ItemResponse, ItemUpdate
from app.services.users import UserService

logger = logging.getLogger(__name__)


class ItemService:
    def __init__(
        self,
        db: Session,
        bookings: BookingRepository,
        users: UserService,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.db = db
        self.bookings = bookings
        self.users = users
        self.clock = clock

    def create_item(self, user_id: int, data: ItemCreate) -> Item:
        owner = self.users.get_user_by_id(user_id)

        if data.request_id is not None:
            request = self.db.query(ItemRequest).filter(ItemRequest.id == data.request_id).first()
            if not request:
                raise NotFoundError(f"Item request with id {data.request_id} not found")

        item = Item(
            owner_id=owner.id,
            name=data.name,
            description=data.description,
            available=data.available,
            request_id=data.request_id,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        logger.info("Item created", extra={"item_id": item.id, "user_id": user_id})
        return item

    def update_item(self, user_id: int, item_id: int, data: ItemUpdate) -> Item:
        item = self.get_item_by_id(item_id)

        # Permission check, reported as "not found" like other foreign items
        if item.owner_id != user_id:
            logger.warning("Non-owner tried to edit item", extra={"item_id": item_id, "user_id": user_id})
            raise NotFoundError(f"User with id {user_id} is not the owner of item with id {item_id}")

        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(item, field, value)

        self.db.commit()
        self.db.refresh(item)
        logger.info("Item updated", extra={"item_id": item_id, "user_id": user_id})
        return item

    def get_item_by_id(self, item_id: int) -> Item:
        item = self.db.query(Item).filter(Item.id == item_id).first()
        if not item:
            logger.warning("Item not found", extra={"item_id": item_id})
            raise NotFoundError(f"Item with id {item_id} not found")
        return item

    def get_item_detail(self, user_id: int, item_id: int) -> ItemDetailResponse:
        item = self.get_item_by_id(item_id)
        return self._detail(item, include_bookings=item.owner_id == user_id, now=self.clock())

    def get_owner_items(self, user_id: int) -> List[ItemDetailResponse]:
        owner = self.users.get_user_by_id(user_id)
        now = self.clock()
        items = self.db.query(Item).filter(Item.owner_id == owner.id).order_by(Item.id).all()
        return [self._detail(item, include_bookings=True, now=now) for item in items]

    def search_items(self, text: Optional[str]) -> List[Item]:
        if not text or not text.strip():
            return []

        pattern = f"%{text.strip()}%"
        return (
            self.db.query(Item)
            .filter(
                Item.available == True,  # noqa: E712
                or_(Item.name.ilike(pattern), Item.description.ilike(pattern)),
            )
            .order_by(Item.id)
            .all()
        )

    def create_comment(self, user_id: int, item_id: int, data: CommentCreate) -> Comment:
        author = self.users.get_user_by_id(user_id)
        item = self.get_item_by_id(item_id)
        now = self.clock()

        # Only a renter whose approved rental is over may comment
        if not self.bookings.has_completed_approved(item.id, author.id, now):
            logger.warning("Comment without finished rental", extra={"item_id": item_id, "user_id": user_id})
            raise ValidationError(
                f"User with id {user_id} cannot comment on item with id {item_id}: "
                "no finished approved booking"
            )

        comment = Comment(item_id=item.id, author_id=author.id, text=data.text, created=now)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        logger.info("Comment created", extra={"item_id": item_id, "user_id": user_id})
        return comment

    def _comments(self, item_id: int) -> List[Comment]:
        return (
            self.db.query(Comment)
            .filter(Comment.item_id == item_id)
            .order_by(Comment.created.desc(), Comment.id.desc())
            .all()
        )

    def _detail(self, item: Item, include_bookings: bool, now: datetime) -> ItemDetailResponse:
        detail = ItemDetailResponse(
            **ItemResponse.model_validate(item).model_dump(),
            comments=[CommentResponse.model_validate(c) for c in self._comments(item.id)],
        )
        if include_bookings:
            last = self.bookings.find_last_for_item(item.id, now)
            nxt = self.bookings.find_next_for_item(item.id, now)
            detail.last_booking = BookingShort.model_validate(last) if last else None
            detail.next_booking = BookingShort.model_validate(nxt) if nxt else None
        return detail
