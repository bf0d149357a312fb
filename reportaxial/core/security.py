# file: reportaxial/core/security.py

import logging
from dataclasses import dataclass
from enum import Enum

import jwt
from fastapi import Request

from reportaxial.core.errors import UnauthorizedError
from reportaxial.core.settings import settings

logger = logging.getLogger("security")


class Role(str, Enum):
    STORE = "store"
    SUPPLIER = "supplier"
    ADMIN = "admin"


@dataclass(frozen=True)
class Caller:
    user_id: int
    role: Role


# ============================================================
# Descodificação do token
# ============================================================

def decode_token(token: str) -> Caller:
    """
    Valida a assinatura do token e devolve a identidade do chamador.

    O emissor atual grava o papel em `userType`; `role` também é aceite.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.PyJWTError as e:
        logger.warning(f"[Auth] Token rejeitado: {e}")
        raise UnauthorizedError("Token inválido") from e

    user_id = payload.get("userId")
    raw_role = payload.get("role") or payload.get("userType")

    if user_id is None or raw_role is None:
        raise UnauthorizedError("Token sem identidade")

    try:
        return Caller(user_id=int(user_id), role=Role(raw_role))
    except (TypeError, ValueError) as e:
        raise UnauthorizedError("Identidade desconhecida no token") from e


def get_caller(request: Request) -> Caller:
    """
    Dependency FastAPI: extrai `Authorization: Bearer <token>`.
    """
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")

    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Token não fornecido")

    return decode_token(token.strip())
