# file: reportaxial/services/projections_service.py

"""
Vistas de leitura por papel.

Cada vista junta problema, resposta formal e (no detalhe) a conversa
num só snapshot lido na mesma sessão.
"""

import logging
from sqlalchemy import case
from sqlalchemy.orm import Session

from reportaxial.core.errors import NotFoundError
from reportaxial.models.problems import Problem, STATUS_RANK
from reportaxial.models.responses import Response
from reportaxial.models.stores import Store
from reportaxial.models.suppliers import Supplier
from reportaxial.schemas.messages import MessageRead
from reportaxial.schemas.problems import (
    ProblemDetail,
    ProblemRead,
    StoreProblemRead,
    StoreSummary,
    SupplierQueueItem,
)
from reportaxial.schemas.responses import ResponseSummary
from reportaxial.services.messages_service import list_messages

logger = logging.getLogger("projections")

# pending < in_progress < resolved < closed
_status_order = case(STATUS_RANK, value=Problem.status, else_=len(STATUS_RANK) + 1)


# ============================================================
# Utils
# ============================================================

def _problem_fields(problem: Problem) -> dict:
    return ProblemRead.model_validate(problem).model_dump()


def _response_summary(response: Response | None, supplier_name: str | None) -> ResponseSummary | None:
    if response is None:
        return None
    summary = ResponseSummary.model_validate(response)
    summary.supplier_name = supplier_name
    return summary


def _with_response(query):
    return (
        query
        .outerjoin(Response, Response.problem_id == Problem.id)
        .outerjoin(Supplier, Supplier.id == Response.supplier_id)
    )


# ============================================================
# Vistas
# ============================================================

def store_view(db: Session, store_id: int) -> list[StoreProblemRead]:
    """Problemas da loja, do mais recentemente atualizado para o mais antigo."""
    rows = (
        _with_response(db.query(Problem, Response, Supplier.supplier_name))
        .filter(Problem.store_id == store_id)
        .order_by(Problem.updated_at.desc(), Problem.id.desc())
        .all()
    )

    return [
        StoreProblemRead(
            **_problem_fields(problem),
            response=_response_summary(response, supplier_name),
        )
        for problem, response, supplier_name in rows
    ]


def supplier_view(db: Session) -> list[SupplierQueueItem]:
    """
    Fila completa do fornecedor: primeiro por status
    (pending, in_progress, resolved, closed), depois do mais recente
    para o mais antigo pela data de criação.
    """
    rows = (
        _with_response(
            db.query(Problem, Response, Supplier.supplier_name, Store.store_name)
            .join(Store, Store.id == Problem.store_id)
        )
        .order_by(_status_order, Problem.created_at.desc(), Problem.id.desc())
        .all()
    )

    return [
        SupplierQueueItem(
            **_problem_fields(problem),
            store_name=store_name,
            response_count=0 if response is None else 1,
            latest_response=_response_summary(response, supplier_name),
        )
        for problem, response, supplier_name, store_name in rows
    ]


def detail(db: Session, problem_id: int) -> ProblemDetail:
    """Problema + loja + resposta formal + conversa completa."""
    row = (
        _with_response(
            db.query(Problem, Response, Supplier.supplier_name, Store)
            .join(Store, Store.id == Problem.store_id)
        )
        .filter(Problem.id == problem_id)
        .first()
    )
    if row is None:
        raise NotFoundError("Problema não encontrado")

    problem, response, supplier_name, store = row
    messages = list_messages(db, problem_id)

    return ProblemDetail(
        **_problem_fields(problem),
        store=StoreSummary.model_validate(store),
        response=_response_summary(response, supplier_name),
        messages=[MessageRead.model_validate(m) for m in messages],
    )
