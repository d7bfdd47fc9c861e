"""
Pytest configuration and fixtures for all tests.

Every test gets its own application bound to a fresh in-memory SQLite
database; the seeding session and the request sessions share the single
StaticPool connection, so rows committed by a test are visible to the API.
"""

import os
import sys
import pytest
from cryptography.fernet import Fernet
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

# Ensure portal_backend is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

os.environ.setdefault("TOKEN_SECRET", Fernet.generate_key().decode())
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from portal_backend.model import Base
from portal_backend.server import create_app
from portal_backend.settings import PortalSettings

from .fixtures import bearer, make_student, make_user


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without a database")
    config.addinivalue_line("markers", "integration: tests that go through the API and SQLite")


@pytest.fixture
def portal_settings() -> PortalSettings:
    return PortalSettings()


@pytest.fixture
def app(portal_settings):
    app = create_app(portal_settings)
    Base.metadata.create_all(bind=app.state.engine)
    try:
        yield app
    finally:
        app.dependency_overrides.clear()
        app.state.engine.dispose()


@pytest.fixture
def client(app) -> TestClient:
    # no context manager: the lifespan would dispose the shared connection
    return TestClient(app)


@pytest.fixture
def db(app) -> Session:
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin_user(db):
    return make_user(db, "admin", first_name="Amaka", last_name="Admin")


@pytest.fixture
def admin_headers(db, admin_user):
    return bearer(db, admin_user)


@pytest.fixture
def exams_user(db):
    return make_user(db, "non_academic_staff", unit="exams", first_name="Emeka", last_name="Exams")


@pytest.fixture
def exams_headers(db, exams_user):
    return bearer(db, exams_user)


@pytest.fixture
def bursary_user(db):
    return make_user(db, "non_academic_staff", unit="bursary", first_name="Bola", last_name="Bursar")


@pytest.fixture
def bursary_headers(db, bursary_user):
    return bearer(db, bursary_user)


@pytest.fixture
def student(db):
    return make_student(db)


@pytest.fixture
def student_headers(db, student):
    return bearer(db, student.profile.user)
