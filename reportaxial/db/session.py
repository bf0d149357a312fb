# file: reportaxial/db/session.py

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from reportaxial.core.errors import ConflictError
from reportaxial.core.settings import settings
from reportaxial.db.base import Base

logger = logging.getLogger("db")

DATABASE_URL = settings.DATABASE_URL
IS_SQLITE = DATABASE_URL.startswith("sqlite")

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if IS_SQLITE else {},
    echo=settings.SQL_ECHO,
)


def enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if IS_SQLITE:
    event.listen(engine, "connect", enable_sqlite_foreign_keys)


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Sessão por request. Cada operação de serviço faz um único commit;
    qualquer exceção desfaz o que ficou pendente.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """
    Cria as tabelas em falta. A gestão de migrações fica fora deste serviço.
    """
    from reportaxial.db import models_registry  # noqa: F401

    if IS_SQLITE and ":memory:" not in DATABASE_URL:
        db_path = DATABASE_URL.split("///", 1)[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    Base.metadata.create_all(bind=engine)
    logger.info("🗄️ Tabelas verificadas/criadas")


@contextmanager
def atomic(db: Session) -> Generator[Session, None, None]:
    """
    Uma operação = uma transação. Faz commit no fim ou rollback total;
    violação de integridade vira ConflictError (o cliente pode repetir).
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"[DB] Conflito de integridade: {e.orig}")
        raise ConflictError() from e
    except Exception:
        db.rollback()
        raise
