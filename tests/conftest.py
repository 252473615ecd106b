"""Pytest configuration and fixtures."""

import itertools
import os
import secrets
from datetime import timedelta

import pytest

# Must be set before app.config is imported
os.environ.setdefault("JWT_SECRET_KEY", f"test-only-{secrets.token_urlsafe(32)}")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ALLOW_SIMULATED_PAYMENTS"] = "true"
os.environ.pop("STRIPE_SECRET_KEY", None)

from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.crud import badge_crud, task_crud, user_crud  # noqa: E402
from app.models.user import UserRole  # noqa: E402
from app.services import task_workflow  # noqa: E402
from app.utils.dates import utcnow  # noqa: E402
from app.utils.security import create_user_token  # noqa: E402

COVER_LETTER = "I have built several similar projects and can start right away."


@pytest.fixture(autouse=True)
def fresh_db():
    """Every test starts from empty tables plus the default badge catalog."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        badge_crud.seed_default_badges(session)
    finally:
        session.close()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """One client per test; all WebSocket sessions share its event loop."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user_factory(db):
    counter = itertools.count(1)

    def _make(role: UserRole = UserRole.STUDENT, **overrides):
        n = next(counter)
        data = {
            "username": f"{role.value}{n}",
            "email": f"{role.value}{n}@example.com",
            "password": "secret123",
            "full_name": f"Test {role.value.title()} {n}",
            "role": role,
        }
        data.update(overrides)
        return user_crud.create_user(db, **data)

    return _make


@pytest.fixture
def employer(user_factory):
    return user_factory(UserRole.EMPLOYER)


@pytest.fixture
def student(user_factory):
    return user_factory(UserRole.STUDENT)


@pytest.fixture
def other_student(user_factory):
    return user_factory(UserRole.STUDENT)


@pytest.fixture
def admin(user_factory):
    return user_factory(UserRole.ADMIN)


@pytest.fixture
def headers_for():
    """Build bearer auth headers for a user."""
    def _headers(user):
        return {"Authorization": f"Bearer {create_user_token(user)}"}
    return _headers


@pytest.fixture
def task_factory(db):
    def _make(employer, **overrides):
        data = {
            "title": "Build a landing page",
            "description": "Responsive landing page for a student startup.",
            "budget": 5000.0,
            "deadline": utcnow() + timedelta(days=7),
            "required_skills": ["html", "css"],
        }
        data.update(overrides)
        return task_crud.create_task(db, employer_id=employer.id, **data)

    return _make


@pytest.fixture
def task(task_factory, employer):
    return task_factory(employer)


@pytest.fixture
def application(db, task, student):
    return task_workflow.submit_application(db, student, task.id, COVER_LETTER)


@pytest.fixture
def accepted_application(db, employer, application):
    task_workflow.decide_application(db, employer, application.id, "accepted")
    return application
