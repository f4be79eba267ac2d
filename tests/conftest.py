import os

# Settings are read at import time, so the environment must be ready before
# anything under app/ is imported.
os.environ.setdefault("DATABASE_HOSTNAME", "localhost")
os.environ.setdefault("DATABASE_PORT", "5432")
os.environ.setdefault("DATABASE_PASSWORD", "test")
os.environ.setdefault("DATABASE_NAME", "servease_test")
os.environ.setdefault("DATABASE_USERNAME", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("MAIL_USERNAME", "noreply@servease.com")
os.environ.setdefault("MAIL_PASSWORD", "test")
os.environ.setdefault("MAIL_FROM", "noreply@servease.com")
os.environ["MAIL_SUPPRESS_SEND"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401  registers every table before create_all
from app.core.security import create_access_token
from app.database import Base, get_db
from app.main import app
from app.models.enums import OTPPurpose
from app.models.otp import OTPRecord
from app.models.user import User
from app.seed import seed_admin_user

TEST_DATABASE_URL = "sqlite:///:memory:"

# StaticPool + :memory: → every session talks to the same in-memory database.
# check_same_thread=False is required because TestClient runs the app in a worker thread.
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

API = "/v1"
PASSWORD = "password123"


@pytest.fixture(name="db")
def db_fixture():
    """Fresh schema per test; the session is shared with the app through get_db."""
    Base.metadata.create_all(test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(test_engine)


@pytest.fixture(name="client")
def client_fixture(db):
    def override_get_db():
        yield db

    # Override BEFORE creating the TestClient so the app never touches PostgreSQL
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def latest_otp(db, email: str, purpose: OTPPurpose) -> str:
    """The code the user would have received by email."""
    db.expire_all()
    record = (
        db.query(OTPRecord)
        .join(OTPRecord.user)
        .filter(User.email == email, OTPRecord.purpose == purpose, OTPRecord.is_used == False)  # noqa: E712
        .order_by(OTPRecord.created_at.desc())
        .first()
    )
    assert record is not None, f"no outstanding {purpose.value} OTP for {email}"
    return record.code


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def signup(client, email: str, account_type: str = "customer", password: str = PASSWORD):
    return client.post(
        f"{API}/auth/signup",
        json={"email": email, "password": password, "accountType": account_type},
    )


def signin_tokens(client, db, email: str, password: str = PASSWORD) -> dict:
    """Runs signin + signin OTP verification and returns the token response body."""
    response = client.post(f"{API}/auth/signin", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    code = latest_otp(db, email, OTPPurpose.SIGNIN)
    response = client.post(f"{API}/auth/signin/verify-otp", json={"email": email, "otp": code})
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def register(client, db):
    """
    Factory: register(email, account_type) signs an account up, signs it in and
    returns (user, auth headers).
    """
    def _register(email: str, account_type: str = "customer"):
        response = signup(client, email, account_type)
        assert response.status_code == 201, response.text
        tokens = signin_tokens(client, db, email)
        db.expire_all()
        user = db.query(User).filter(User.email == email).first()
        return user, bearer(tokens["accessToken"])
    return _register


@pytest.fixture
def admin_headers(db):
    admin = seed_admin_user(db, "admin@servease.com", "adminpass123")
    return bearer(create_access_token(admin))
