# file: reportaxial/api/v1/problems.py

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from reportaxial.core.errors import ForbiddenError
from reportaxial.core.security import Caller, Role, get_caller
from reportaxial.db.session import get_db
from reportaxial.models.problems import Problem
from reportaxial.schemas.messages import MessageCreate, MessageRead
from reportaxial.schemas.problems import (
    MarkViewedRequest,
    ProblemCreate,
    ProblemDetail,
    ProblemRead,
    ProblemUpdate,
    StoreProblemRead,
    SupplierQueueItem,
)
from reportaxial.schemas.responses import ResponseCreate, ResponseRead
from reportaxial.services.access_gate import Operation, authorize
from reportaxial.services.lifecycle_service import resolve_problem
from reportaxial.services.messages_service import list_messages, post_message
from reportaxial.services.problems_service import (
    create_problem,
    edit_problem,
    get_problem,
    get_store_for_user,
    get_supplier_for_user,
)
from reportaxial.services.projections_service import detail, store_view, supplier_view
from reportaxial.services.responses_service import upsert_response
from reportaxial.services.visibility_service import mark_viewed

router = APIRouter()

# ids fora do INTEGER de 64 bits nunca existem; rejeitados na validação (400)
ProblemId = Annotated[int, Path(ge=1, le=2**63 - 1)]
logger = logging.getLogger("problems_api")


# ============================================================
# Utils
# ============================================================

def _authorize_on_problem(db: Session, caller: Caller, operation: Operation, problem_id: int) -> Problem:
    """
    Carrega o problema (404 se não existe) e valida o acesso do chamador.
    """
    problem = get_problem(db, problem_id)

    caller_store_id = None
    if caller.role == Role.STORE:
        caller_store_id = get_store_for_user(db, caller.user_id).id

    authorize(caller, operation, problem_store_id=problem.store_id, caller_store_id=caller_store_id)
    return problem


# ============================================================
# Loja
# ============================================================

@router.post("", response_model=ProblemRead, status_code=status.HTTP_201_CREATED)
def create_problem_endpoint(
    payload: ProblemCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    authorize(caller, Operation.CREATE_PROBLEM)
    store = get_store_for_user(db, caller.user_id)

    logger.info(f"[Problems] Novo problema: store_id={store.id}")
    return create_problem(db, store.id, payload)


@router.get("/store", response_model=list[StoreProblemRead])
def list_store_problems(
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    authorize(caller, Operation.LIST_STORE_PROBLEMS)
    store = get_store_for_user(db, caller.user_id)
    return store_view(db, store.id)


# ============================================================
# Fornecedor
# ============================================================

@router.get("/supplier", response_model=list[SupplierQueueItem])
def list_supplier_queue(
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    authorize(caller, Operation.LIST_SUPPLIER_QUEUE)
    return supplier_view(db)


@router.patch("/{problem_id}/resolve", response_model=ProblemRead)
def resolve_problem_endpoint(
    problem_id: ProblemId,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    _authorize_on_problem(db, caller, Operation.RESOLVE, problem_id)

    logger.info(f"[Problems] Resolver problem_id={problem_id} user_id={caller.user_id}")
    return resolve_problem(db, problem_id)


@router.post("/{problem_id}/respond", response_model=ResponseRead, status_code=status.HTTP_201_CREATED)
def respond_endpoint(
    problem_id: ProblemId,
    payload: ResponseCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    _authorize_on_problem(db, caller, Operation.RESPOND, problem_id)
    supplier = get_supplier_for_user(db, caller.user_id)

    return upsert_response(db, problem_id, supplier.id, payload.text)


# ============================================================
# Ambos os lados
# ============================================================

@router.get("/{problem_id}", response_model=ProblemDetail)
def get_problem_detail(
    problem_id: ProblemId,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    _authorize_on_problem(db, caller, Operation.READ_PROBLEM, problem_id)
    return detail(db, problem_id)


@router.patch("/{problem_id}", response_model=ProblemRead)
def edit_problem_endpoint(
    problem_id: ProblemId,
    payload: ProblemUpdate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    _authorize_on_problem(db, caller, Operation.EDIT_PROBLEM, problem_id)
    return edit_problem(db, problem_id, payload)


@router.patch("/{problem_id}/mark-viewed", response_model=ProblemRead)
def mark_viewed_endpoint(
    problem_id: ProblemId,
    payload: MarkViewedRequest | None = None,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    _authorize_on_problem(db, caller, Operation.MARK_VIEWED, problem_id)

    role = payload.role if payload and payload.role else caller.role
    if role != caller.role:
        # cada lado só marca o seu próprio flag
        raise ForbiddenError("Só pode marcar como visto pelo seu próprio papel")

    return mark_viewed(db, problem_id, role)


@router.post("/{problem_id}/messages", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def post_message_endpoint(
    problem_id: ProblemId,
    payload: MessageCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    _authorize_on_problem(db, caller, Operation.POST_MESSAGE, problem_id)
    return post_message(db, problem_id, caller.role, payload.text)


@router.get("/{problem_id}/messages", response_model=list[MessageRead])
def list_messages_endpoint(
    problem_id: ProblemId,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
):
    _authorize_on_problem(db, caller, Operation.LIST_MESSAGES, problem_id)
    return list_messages(db, problem_id)
