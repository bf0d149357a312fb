# file: reportaxial/services/access_gate.py

"""
Controlo de acesso por papel.

Puro: decide só a partir do chamador, da operação e da loja dona do
problema. Não toca na base de dados.
"""

import logging
from enum import Enum

from reportaxial.core.errors import ForbiddenError, UnauthorizedError
from reportaxial.core.security import Caller, Role

logger = logging.getLogger("access_gate")


class Operation(str, Enum):
    CREATE_PROBLEM = "create_problem"
    LIST_STORE_PROBLEMS = "list_store_problems"
    LIST_SUPPLIER_QUEUE = "list_supplier_queue"
    READ_PROBLEM = "read_problem"
    EDIT_PROBLEM = "edit_problem"
    MARK_VIEWED = "mark_viewed"
    RESOLVE = "resolve"
    RESPOND = "respond"
    POST_MESSAGE = "post_message"
    LIST_MESSAGES = "list_messages"


# Loja: operações sem problema alvo
STORE_OPERATIONS = frozenset({
    Operation.CREATE_PROBLEM,
    Operation.LIST_STORE_PROBLEMS,
})

# Loja: só sobre problemas da própria loja
STORE_OWNED_OPERATIONS = frozenset({
    Operation.READ_PROBLEM,
    Operation.EDIT_PROBLEM,
    Operation.MARK_VIEWED,
    Operation.POST_MESSAGE,
    Operation.LIST_MESSAGES,
})

# Fornecedor: sobre qualquer problema
SUPPLIER_OPERATIONS = frozenset({
    Operation.LIST_SUPPLIER_QUEUE,
    Operation.READ_PROBLEM,
    Operation.MARK_VIEWED,
    Operation.RESOLVE,
    Operation.RESPOND,
    Operation.POST_MESSAGE,
    Operation.LIST_MESSAGES,
})


def authorize(
    caller: Caller | None,
    operation: Operation,
    problem_store_id: int | None = None,
    caller_store_id: int | None = None,
) -> None:
    """
    Devolve None se a operação é permitida; caso contrário levanta
    UnauthorizedError (sem identidade) ou ForbiddenError (papel errado
    ou problema de outra loja).

    O admin só gere contas, por isso não tem nenhuma operação aqui.
    """
    if caller is None:
        raise UnauthorizedError()

    if caller.role == Role.SUPPLIER and operation in SUPPLIER_OPERATIONS:
        return

    if caller.role == Role.STORE:
        if operation in STORE_OPERATIONS:
            return
        if (
            operation in STORE_OWNED_OPERATIONS
            and problem_store_id is not None
            and problem_store_id == caller_store_id
        ):
            return

    logger.warning(
        f"[AccessGate] Negado: user_id={caller.user_id} role={caller.role.value} "
        f"operation={operation.value} problem_store_id={problem_store_id}"
    )
    raise ForbiddenError()
