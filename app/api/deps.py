from fastapi import Depends
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.repositories.booking import SqlAlchemyBookingRepository
from app.services.bookings import BookingService
from app.services.item_requests import ItemRequestService
from app.services.items import ItemService
from app.services.users import UserService


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_item_service(db: Session = Depends(get_db)) -> ItemService:
    return ItemService(db, bookings=SqlAlchemyBookingRepository(db), users=UserService(db))


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    users = UserService(db)
    return BookingService(
        bookings=SqlAlchemyBookingRepository(db),
        users=users,
        items=ItemService(db, bookings=SqlAlchemyBookingRepository(db), users=users),
    )


def get_item_request_service(db: Session = Depends(get_db)) -> ItemRequestService:
    return ItemRequestService(db, users=UserService(db))
