from datetime import date, datetime

from pydantic import BaseModel

from reportaxial.core.security import Role
from reportaxial.schemas.messages import MessageRead
from reportaxial.schemas.responses import ResponseSummary


# ===========================================
# Create / Update
# ===========================================

class ProblemCreate(BaseModel):
    description: str
    problem_type: str | None = None
    order_date: date | None = None
    supplier_order: str | None = None
    product: str | None = None
    eurocode: str | None = None
    observations: str | None = None
    priority: str | None = None  # "normal" quando omitido


class ProblemUpdate(BaseModel):
    # só campos de texto; o status nunca muda por edição
    observations: str | None = None


class MarkViewedRequest(BaseModel):
    role: Role | None = None


# ===========================================
# Read
# ===========================================

class ProblemRead(BaseModel):
    id: int
    store_id: int
    problem_type: str | None = None
    description: str
    order_date: date | None = None
    supplier_order: str | None = None
    product: str | None = None
    eurocode: str | None = None
    observations: str | None = None
    priority: str
    status: str
    viewed_by_store: bool
    viewed_by_supplier: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StoreSummary(BaseModel):
    id: int
    store_name: str
    contact_person: str | None = None
    phone: str | None = None

    class Config:
        from_attributes = True


# ===========================================
# Projeções
# ===========================================

class StoreProblemRead(ProblemRead):
    response: ResponseSummary | None = None


class SupplierQueueItem(ProblemRead):
    store_name: str
    response_count: int
    latest_response: ResponseSummary | None = None


class ProblemDetail(ProblemRead):
    store: StoreSummary
    response: ResponseSummary | None = None
    messages: list[MessageRead] = []
