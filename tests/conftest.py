"""Shared fixtures: in-memory database, app client, fake Stripe gateway and email recorder."""

import os

# Settings are read at import time, so the environment must be in place first
os.environ["TESTING"] = "true"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["FRONTEND_URL"] = "http://localhost:3000"
os.environ.pop("SMTP_HOST", None)

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.api.dependencies import get_email_service, get_payment_gateway
from app.core.config import get_settings
from app.db.database import SessionLocal, engine
from app.db.models import Base
from app.infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl

from tests.fakes import FakeStripeGateway, RecordingEmailService


@pytest.fixture(autouse=True)
def database():
    """Fresh schema for every test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def unit_of_work(db_session):
    return UnitOfWorkImpl(db_session)


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def gateway(settings):
    return FakeStripeGateway(settings)


@pytest.fixture
def emails(settings):
    return RecordingEmailService(settings)


@pytest.fixture
def client(gateway, emails):
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_email_service] = lambda: emails
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
