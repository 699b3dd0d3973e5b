# app/schemas/comment.py
from pydantic import BaseModel, constr
from datetime import datetime


class CommentCreate(BaseModel):
    text: constr(strip_whitespace=True, min_length=1)


class CommentResponse(BaseModel):
    id: int
    text: str
    author_name: str
    created: datetime

    class Config:
        from_attributes = True
