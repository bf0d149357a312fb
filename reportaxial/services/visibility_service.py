# file: reportaxial/services/visibility_service.py

"""
Flags de visualização por lado (loja / fornecedor).

- quem publica uma mensagem marca o problema como "não visto" para o
  outro lado;
- quem marca como visto só mexe no seu próprio flag.

Cada escrita é um único UPDATE sobre um só flag, portanto loja e
fornecedor nunca disputam a mesma coluna.
"""

import logging
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from reportaxial.core.errors import InvalidInputError, NotFoundError
from reportaxial.core.security import Role
from reportaxial.db.base import utcnow
from reportaxial.db.session import atomic
from reportaxial.models.problems import Problem
from reportaxial.services.lifecycle_service import maybe_advance_from_pending
from reportaxial.services.problems_service import get_problem

logger = logging.getLogger("visibility")

OWN_FLAG = {
    Role.STORE: "viewed_by_store",
    Role.SUPPLIER: "viewed_by_supplier",
}

OTHER_SIDE_FLAG = {
    Role.STORE: "viewed_by_supplier",
    Role.SUPPLIER: "viewed_by_store",
}


def resolve_side(role: Role | str) -> Role:
    try:
        side = Role(role)
    except ValueError as e:
        raise InvalidInputError(f"Papel inválido: {role}") from e
    if side not in OWN_FLAG:
        raise InvalidInputError(f"Papel sem flag de visualização: {side.value}")
    return side


def flag_unseen_for_other_side(
    db: Session, problem_id: int, author_role: Role | str, now: datetime | None = None
) -> None:
    """
    Nova atividade do autor: o outro lado passa a ter algo por ver.
    Também atualiza `updated_at`. Corre na transação de quem chama.
    """
    flag = OTHER_SIDE_FLAG[resolve_side(author_role)]

    result = db.execute(
        update(Problem)
        .where(Problem.id == problem_id)
        .values({flag: False, "updated_at": now or utcnow()})
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Problema não encontrado")


def mark_viewed(db: Session, problem_id: int, role: Role | str) -> Problem:
    """
    Marca o problema como visto pelo `role`. Se for o fornecedor e o
    problema ainda estiver `pending`, avança para `in_progress`.

    Ler não é alterar o conteúdo: `updated_at` só muda quando esta chamada
    também faz a transição de status. Assim a lista da loja (ordenada por
    `updated_at`) não se reordena cada vez que alguém abre um problema.
    """
    side = resolve_side(role)
    flag = OWN_FLAG[side]

    with atomic(db):
        result = db.execute(
            update(Problem)
            .where(Problem.id == problem_id)
            .values({flag: True})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("Problema não encontrado")

        if side == Role.SUPPLIER:
            maybe_advance_from_pending(db, problem_id)

    logger.info(f"[Visibility] problem_id={problem_id} visto por {side.value}")
    return get_problem(db, problem_id)
