from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum as SAEnum
from sqlalchemy.orm import relationship

from app.core.enums import BookingStatus
from app.db.base import Base


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)

    item_id = Column(Integer, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    booker_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    start = Column(DateTime, nullable=False, index=True)
    end = Column(DateTime, nullable=False)

    status = Column(
        SAEnum(BookingStatus, name="booking_status", native_enum=False, length=16),
        nullable=False,
        default=BookingStatus.WAITING,
        index=True,
    )

    # bumped on every UPDATE; a stale write raises StaleDataError
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    # relationships
    item = relationship("Item", foreign_keys=[item_id], back_populates="bookings", lazy="joined", innerjoin=True)
    booker = relationship("User", foreign_keys=[booker_id], back_populates="bookings", lazy="joined", innerjoin=True)

    def __repr__(self):
        return f"<Booking id={self.id} item_id={self.item_id} booker_id={self.booker_id} status={self.status}>"
