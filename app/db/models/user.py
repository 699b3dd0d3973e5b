# app/db/models/user.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)

    # items this user lists for rent
    items = relationship(
        "Item",
        back_populates="owner",
        cascade="all, delete-orphan",
        order_by="Item.id",
    )

    # removed together with the user
    bookings = relationship("Booking", back_populates="booker", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="author", cascade="all, delete-orphan")
    requests = relationship("ItemRequest", back_populates="requestor", cascade="all, delete-orphan")
