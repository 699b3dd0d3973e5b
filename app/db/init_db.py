# app/db/init_db.py
from app.db.base import Base, engine

# importing the model modules registers every mapper on Base
from app.db.models import user, item, item_request, booking, comment  # noqa: F401


def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)
