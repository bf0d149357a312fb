from datetime import datetime

from pydantic import BaseModel


class MessageCreate(BaseModel):
    text: str


class MessageRead(BaseModel):
    id: int
    problem_id: int
    author_role: str
    text: str
    created_at: datetime

    class Config:
        from_attributes = True
