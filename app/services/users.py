import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.db.models.user import User
from app.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def create_user(self, data: UserCreate) -> User:
        user = User(name=data.name, email=data.email)
        self.db.add(user)
        self._commit_unique_email(user.email)
        self.db.refresh(user)
        logger.info("User created", extra={"user_id": user.id})
        return user

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        user = self.get_user_by_id(user_id)

        # Update fields one-by-one
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(user, field, value)

        self._commit_unique_email(user.email)
        self.db.refresh(user)
        logger.info("User updated", extra={"user_id": user.id})
        return user

    def get_user_by_id(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            logger.warning("User not found", extra={"user_id": user_id})
            raise NotFoundError(f"User with id {user_id} not found")
        return user

    def get_all_users(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def delete_user(self, user_id: int) -> None:
        user = self.get_user_by_id(user_id)
        self.db.delete(user)
        self.db.commit()
        logger.info("User deleted", extra={"user_id": user_id})

    def _commit_unique_email(self, email: str) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Duplicate e-mail %s", email)
            raise ConflictError(f"User with email {email} already exists") from None
