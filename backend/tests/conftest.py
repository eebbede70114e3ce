import os

# The module-level engine is never used by the tests; each test gets its own file database.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from pr_tracker.core.db import engine_options, get_db, init_db
from pr_tracker.core.security import create_access_token
from pr_tracker.domain.constants import SERIES_PURCHASE_REQUEST
from pr_tracker.main import app
from pr_tracker.models import Counter


@pytest.fixture
def engine(tmp_path):
    dsn = f"sqlite:///{tmp_path / 'pr_tracker_test.db'}"
    eng = create_engine(dsn, **engine_options(dsn))
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token(user_id="0" * 32, email="manager@example.com", role="manager")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def counter_value(session_factory):
    """Reads a counter row directly (0 if the series was never used)."""
    def _read(series: str = SERIES_PURCHASE_REQUEST) -> int:
        s = session_factory()
        try:
            row = s.get(Counter, series)
            return row.value if row else 0
        finally:
            s.close()
    return _read


@pytest.fixture
def pr_payload():
    return {
        "propertyReference": "UPRN-100200",
        "location": "Raqqa",
        "department": "Health",
        "estimatedAmount": 1250.5,
        "requester": "Field Office",
    }
