from fastapi import Header

from app.core.config import settings


def get_current_user_id(user_id: int = Header(..., alias=settings.USER_ID_HEADER)) -> int:
    """The acting user, as sent by the gateway in the user id header."""
    return user_id
