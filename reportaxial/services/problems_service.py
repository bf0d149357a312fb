# file: reportaxial/services/problems_service.py

import logging
from sqlalchemy.orm import Session

from reportaxial.core.errors import InvalidInputError, NotFoundError
from reportaxial.db.base import utcnow
from reportaxial.db.session import atomic
from reportaxial.models.problems import Problem, ProblemStatus, DEFAULT_PRIORITY
from reportaxial.models.stores import Store
from reportaxial.models.suppliers import Supplier
from reportaxial.schemas.problems import ProblemCreate, ProblemUpdate

logger = logging.getLogger("problems_service")


# ============================================================
# Perfis do chamador
# ============================================================

def get_store_for_user(db: Session, user_id: int) -> Store:
    store = db.query(Store).filter(Store.user_id == user_id).first()
    if not store:
        raise NotFoundError("Loja não encontrada")
    return store


def get_supplier_for_user(db: Session, user_id: int) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.user_id == user_id).first()
    if not supplier:
        raise NotFoundError("Fornecedor não encontrado")
    return supplier


# ============================================================
# Problemas
# ============================================================

def get_problem(db: Session, problem_id: int) -> Problem:
    problem = db.query(Problem).filter(Problem.id == problem_id).first()
    if not problem:
        raise NotFoundError("Problema não encontrado")
    return problem


def create_problem(db: Session, store_id: int, data: ProblemCreate) -> Problem:
    """
    Cria o problema sempre em `pending`: visto pela loja, ainda não
    visto pelo fornecedor.
    """
    if not data.description.strip():
        raise InvalidInputError("A descrição é obrigatória")

    priority = (data.priority or "").strip() or DEFAULT_PRIORITY
    now = utcnow()

    problem = Problem(
        **data.model_dump(exclude={"priority"}),
        store_id=store_id,
        priority=priority,
        status=ProblemStatus.PENDING.value,
        viewed_by_store=True,
        viewed_by_supplier=False,
        created_at=now,
        updated_at=now,
    )

    with atomic(db):
        db.add(problem)

    db.refresh(problem)
    logger.info(f"[Problems] Criado problem_id={problem.id} store_id={store_id} priority={priority}")
    return problem


def edit_problem(db: Session, problem_id: int, data: ProblemUpdate) -> Problem:
    """
    Atualiza só os campos de texto. O status fica como está.
    """
    problem = get_problem(db, problem_id)

    with atomic(db):
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(problem, field, value)
        problem.updated_at = utcnow()

    db.refresh(problem)
    logger.info(f"[Problems] Editado problem_id={problem_id} status={problem.status}")
    return problem
