"""Shared pytest fixtures.

Provides an in-memory SQLite session, a TestClient wired to it, seeded
store/supplier/admin accounts and a bearer-token factory.
"""

import os

# Must be set before reportaxial.core.settings is imported.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET"] = "reportaxial-test-secret-0123456789abcdef"

from collections.abc import Callable, Generator

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from reportaxial.core.settings import settings
from reportaxial.db import models_registry  # noqa: F401
from reportaxial.db.base import Base
from reportaxial.db.session import enable_sqlite_foreign_keys, get_db
from reportaxial.main import app
from reportaxial.models.problems import Problem
from reportaxial.models.stores import Store
from reportaxial.models.suppliers import Supplier
from reportaxial.models.users import User


@pytest.fixture
def test_db() -> Generator[Session, None, None]:
    """In-memory database with every table created; dropped after the test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(test_db: Session) -> Generator[TestClient, None, None]:
    """TestClient using the test session for every request."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ============================================================================
# Accounts
# ============================================================================


def _add_user(db: Session, email: str, user_type: str) -> User:
    user = User(email=email, user_type=user_type)
    db.add(user)
    db.flush()
    return user


@pytest.fixture
def store_user(test_db: Session) -> User:
    user = _add_user(test_db, "loja@axial.pt", "store")
    test_db.add(Store(user_id=user.id, store_name="Loja Porto", contact_person="Ana", phone="220000000"))
    test_db.commit()
    return user


@pytest.fixture
def store(test_db: Session, store_user: User) -> Store:
    return test_db.query(Store).filter(Store.user_id == store_user.id).one()


@pytest.fixture
def other_store_user(test_db: Session) -> User:
    user = _add_user(test_db, "loja2@axial.pt", "store")
    test_db.add(Store(user_id=user.id, store_name="Loja Braga"))
    test_db.commit()
    return user


@pytest.fixture
def other_store(test_db: Session, other_store_user: User) -> Store:
    return test_db.query(Store).filter(Store.user_id == other_store_user.id).one()


@pytest.fixture
def supplier_user(test_db: Session) -> User:
    user = _add_user(test_db, "fornecedor@axial.pt", "supplier")
    test_db.add(Supplier(user_id=user.id, supplier_name="Vidros Norte", email="fornecedor@axial.pt"))
    test_db.commit()
    return user


@pytest.fixture
def supplier(test_db: Session, supplier_user: User) -> Supplier:
    return test_db.query(Supplier).filter(Supplier.user_id == supplier_user.id).one()


@pytest.fixture
def admin_user(test_db: Session) -> User:
    user = _add_user(test_db, "admin@axial.pt", "admin")
    test_db.commit()
    return user


@pytest.fixture
def pending_problem(test_db: Session, store: Store) -> Problem:
    problem = Problem(store_id=store.id, description="Para-brisas partido na entrega")
    test_db.add(problem)
    test_db.commit()
    test_db.refresh(problem)
    return problem


# ============================================================================
# Tokens
# ============================================================================


def make_token(user: User, claim: str = "role") -> str:
    return jwt.encode(
        {"userId": user.id, claim: user.user_type},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


@pytest.fixture
def auth_headers() -> Callable[[User], dict]:
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {make_token(user)}"}

    return _headers
