"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os
import tempfile

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from tests.test_constants import TEST_ADMIN_PASSWORD, TEST_INTERNAL_JOB_TOKEN

# Force an in-memory database when pytest runs; don't inherit from .env
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MEDIA_DIR"] = tempfile.mkdtemp(prefix="residency-board-media-")
os.environ["ADMIN_PASSWORD"] = TEST_ADMIN_PASSWORD
os.environ["INTERNAL_JOB_TOKEN"] = TEST_INTERNAL_JOB_TOKEN
os.environ.pop("SOFTR_JWT_TOKEN", None)
os.environ.pop("SOURCE_ENDPOINTS", None)


@pytest.fixture
def db() -> Session:
    """Session on a fresh in-memory SQLite schema, one per test.

    StaticPool keeps a single connection so TestClient worker threads see the
    same database.
    """
    import residency_board.models  # noqa: F401
    from residency_board.db.session import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    session = Session(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from residency_board.main import app

    return TestClient(app)


@pytest.fixture
def client_with_db(db: Session) -> TestClient:
    """TestClient with get_db overridden to use the test db session."""
    from residency_board.db.session import get_db
    from residency_board.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app)
    yield c
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def make_company(db: Session):
    """Factory: create a company with optional alias slugs."""
    from residency_board.models import Company, CompanyAlias

    def _make(name: str, slug: str, aliases: list[str] | None = None) -> Company:
        company = Company(name=name, slug=slug)
        for alias in aliases or []:
            company.aliases.append(CompanyAlias(alias_slug=alias))
        db.add(company)
        db.commit()
        db.refresh(company)
        return company

    return _make


@pytest.fixture
def make_residency(db: Session):
    """Factory: create a residency, optionally attached to a company."""
    from residency_board.models import Residency

    counter = {"n": 0}

    def _make(company_id: int | None = None, **fields) -> Residency:
        counter["n"] += 1
        data = {
            "external_id": f"rec{counter['n']:04d}",
            "name": f"R1 | Company {counter['n']}",
            "residency_type": "R1",
            "residency_title": "Residency",
            "job_title": "Engineer",
            "company_id": company_id,
        }
        data.update(fields)
        residency = Residency(**data)
        db.add(residency)
        db.commit()
        db.refresh(residency)
        return residency

    return _make
