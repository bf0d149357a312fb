# file: reportaxial/services/messages_service.py

import logging
from sqlalchemy.orm import Session

from reportaxial.core.errors import InvalidInputError
from reportaxial.core.security import Role
from reportaxial.db.base import utcnow
from reportaxial.db.session import atomic
from reportaxial.models.messages import Message
from reportaxial.services.problems_service import get_problem
from reportaxial.services.visibility_service import flag_unseen_for_other_side, resolve_side

logger = logging.getLogger("messages_service")


def post_message(db: Session, problem_id: int, author_role: Role | str, text: str) -> Message:
    """
    Acrescenta uma mensagem à conversa do problema.

    Na mesma transação: grava a mensagem, marca o problema como não
    visto pelo outro lado e atualiza `updated_at`. Não mexe no status.
    """
    if not text or not text.strip():
        raise InvalidInputError("A mensagem não pode estar vazia")

    role = resolve_side(author_role)
    now = utcnow()

    with atomic(db):
        flag_unseen_for_other_side(db, problem_id, role, now=now)

        msg = Message(
            problem_id=problem_id,
            author_role=role.value,
            text=text,
            created_at=now,
        )
        db.add(msg)

    db.refresh(msg)
    logger.info(f"[Thread] Mensagem message_id={msg.id} problem_id={problem_id} autor={role.value}")
    return msg


def list_messages(db: Session, problem_id: int) -> list[Message]:
    """Conversa completa, da mais antiga para a mais recente."""
    get_problem(db, problem_id)

    return (
        db.query(Message)
        .filter(Message.problem_id == problem_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )
