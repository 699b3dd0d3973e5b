# app/db/models/item_request.py
from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from app.db.base import Base


class ItemRequest(Base):
    """An open "I need this" post that owners answer by listing an item."""

    __tablename__ = "item_requests"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String, nullable=False)
    requestor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created = Column(DateTime, nullable=False, default=datetime.now)

    requestor = relationship("User", foreign_keys=[requestor_id], back_populates="requests")
    items = relationship(
        "Item",
        back_populates="request",
        order_by="Item.id",
        lazy="selectin"
    )
