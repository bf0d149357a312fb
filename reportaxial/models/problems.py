from enum import Enum

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, ForeignKey, CheckConstraint
from reportaxial.db.base import Base, utcnow


class ProblemStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


# Ordem da fila do fornecedor
STATUS_RANK = {
    ProblemStatus.PENDING.value: 1,
    ProblemStatus.IN_PROGRESS.value: 2,
    ProblemStatus.RESOLVED.value: 3,
    ProblemStatus.CLOSED.value: 4,
}

DEFAULT_PRIORITY = "normal"


class Problem(Base):
    __tablename__ = "problems"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'in_progress', 'resolved', 'closed')",
            name="ck_problems_status",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)

    # Descrição do problema
    problem_type = Column(String, nullable=True)
    description = Column(Text, nullable=False)
    order_date = Column(Date, nullable=True)
    supplier_order = Column(String, nullable=True)
    product = Column(String, nullable=True)
    eurocode = Column(String, nullable=True)
    observations = Column(Text, nullable=True)

    priority = Column(String, nullable=False, default=DEFAULT_PRIORITY)
    status = Column(String, nullable=False, default=ProblemStatus.PENDING.value)

    # Notificações (um flag por lado)
    viewed_by_store = Column(Boolean, nullable=False, default=True)
    viewed_by_supplier = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
