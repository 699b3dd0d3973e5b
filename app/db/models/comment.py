# app/db/models/comment.py
from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from app.db.base import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    text = Column(String, nullable=False)

    created = Column(DateTime, nullable=False, default=datetime.now)

    # relationships (helpful for response shaping)
    item = relationship("Item", foreign_keys=[item_id], back_populates="comments")
    author = relationship("User", foreign_keys=[author_id], back_populates="comments", lazy="joined")

    @property
    def author_name(self):
        return self.author.name
