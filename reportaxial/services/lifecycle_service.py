# file: reportaxial/services/lifecycle_service.py

"""
Ciclo de vida do problema.

    pending ──(1ª resposta formal | fornecedor marca como visto)──> in_progress
    *       ──(resolve explícito do fornecedor)────────────────────> resolved

Não há regressão automática a partir de `resolved`: novas mensagens ou
respostas só mexem em `updated_at`.
"""

import logging
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from reportaxial.core.errors import NotFoundError
from reportaxial.db.base import utcnow
from reportaxial.db.session import atomic
from reportaxial.models.problems import Problem, ProblemStatus
from reportaxial.services.problems_service import get_problem

logger = logging.getLogger("lifecycle")


def maybe_advance_from_pending(db: Session, problem_id: int, now: datetime | None = None) -> bool:
    """
    Único ponto de disparo de pending -> in_progress.

    Compare-and-swap num só UPDATE: com pedidos concorrentes só um
    encontra `pending`, os outros não alteram nada. Não faz commit;
    corre dentro da transação de quem chama.

    Retorna True se esta chamada fez a transição.
    """
    result = db.execute(
        update(Problem)
        .where(
            Problem.id == problem_id,
            Problem.status == ProblemStatus.PENDING.value,
        )
        .values(
            status=ProblemStatus.IN_PROGRESS.value,
            updated_at=now or utcnow(),
        )
        .execution_options(synchronize_session=False)
    )

    advanced = result.rowcount == 1
    if advanced:
        logger.info(f"[Lifecycle] problem_id={problem_id} pending -> in_progress")
    return advanced


def touch_problem(db: Session, problem_id: int, now: datetime | None = None) -> None:
    """Atualiza `updated_at` dentro da transação corrente."""
    result = db.execute(
        update(Problem)
        .where(Problem.id == problem_id)
        .values(updated_at=now or utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Problema não encontrado")


def resolve_problem(db: Session, problem_id: int) -> Problem:
    """
    Força `resolved` seja qual for o status atual. Idempotente.
    """
    with atomic(db):
        result = db.execute(
            update(Problem)
            .where(Problem.id == problem_id)
            .values(
                status=ProblemStatus.RESOLVED.value,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Problema não encontrado")

    logger.info(f"[Lifecycle] problem_id={problem_id} -> resolved")
    return get_problem(db, problem_id)
