# file: reportaxial/services/responses_service.py

import logging
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from reportaxial.core.errors import InternalError, InvalidInputError
from reportaxial.db.base import utcnow
from reportaxial.db.session import atomic
from reportaxial.models.responses import Response
from reportaxial.services.lifecycle_service import maybe_advance_from_pending, touch_problem
from reportaxial.services.problems_service import get_problem

logger = logging.getLogger("responses_service")

# Dialetos com INSERT ... ON CONFLICT
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_for(db: Session):
    dialect = db.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise InternalError(f"Dialeto sem suporte a upsert: {dialect}")
    return insert


def get_response(db: Session, problem_id: int) -> Response | None:
    return db.query(Response).filter(Response.problem_id == problem_id).first()


def upsert_response(db: Session, problem_id: int, supplier_id: int, text: str) -> Response:
    """
    Resposta formal do fornecedor, a última ganha:
    - não existe → cria
    - já existe → substitui texto, fornecedor e updated_at

    Um único INSERT ... ON CONFLICT (problem_id) evita linhas duplicadas
    com dois fornecedores a responder ao mesmo tempo. Na mesma transação
    o problema avança de `pending` para `in_progress` (se ainda estiver
    pendente). Os flags de visualização não são tocados.
    """
    if not text or not text.strip():
        raise InvalidInputError("A resposta não pode estar vazia")

    get_problem(db, problem_id)
    insert = _insert_for(db)
    now = utcnow()

    stmt = insert(Response).values(
        problem_id=problem_id,
        supplier_id=supplier_id,
        response_text=text,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Response.problem_id],
        set_={
            "supplier_id": stmt.excluded.supplier_id,
            "response_text": stmt.excluded.response_text,
            "updated_at": stmt.excluded.updated_at,
        },
    )

    with atomic(db):
        db.execute(stmt)
        if not maybe_advance_from_pending(db, problem_id, now=now):
            touch_problem(db, problem_id, now=now)

    response = get_response(db, problem_id)
    logger.info(
        f"[Responses] Resposta gravada response_id={response.id} "
        f"problem_id={problem_id} supplier_id={supplier_id}"
    )
    return response
