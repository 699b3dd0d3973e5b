# app/db/models/item.py

from sqlalchemy import Column, Integer, String, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from app.db.base import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign keys
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    request_id = Column(Integer, ForeignKey("item_requests.id", ondelete="SET NULL"), nullable=True)

    # Basic details
    name = Column(String, nullable=False)
    description = Column(String, nullable=False)

    # Can be booked right now
    available = Column(Boolean, nullable=False, default=True)

    # Relationships
    owner = relationship("User", back_populates="items")
    request = relationship("ItemRequest", back_populates="items")
    bookings = relationship("Booking", back_populates="item", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="item", cascade="all, delete-orphan")
