from datetime import datetime

from pydantic import BaseModel


class ResponseCreate(BaseModel):
    text: str


class ResponseRead(BaseModel):
    id: int
    problem_id: int
    supplier_id: int
    response_text: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ResponseSummary(ResponseRead):
    supplier_name: str | None = None
