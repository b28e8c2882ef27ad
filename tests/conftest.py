"""Shared fixtures: in-memory database, fixed signing secret, API client."""

import pyotp
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from auth_service.api.deps import get_codec
from auth_service.database import create_db_and_tables, get_session
from auth_service.main import app
from auth_service.models.user import User
from auth_service.services.auth import hash_password
from auth_service.services.credentials import CredentialCodec, Identity

SIGNING_SECRET = "test-signing-secret"
PASSWORD = "correct horse battery"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def codec() -> CredentialCodec:
    return CredentialCodec(secret=SIGNING_SECRET)


@pytest.fixture()
def client(engine, codec):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_codec] = lambda: codec
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def password() -> str:
    return PASSWORD


@pytest.fixture()
def user(db_session) -> User:
    """Account with id 1 and no second factor."""
    user = User(
        id=1,
        email="a@x.com",
        username="a",
        hashed_password=hash_password(PASSWORD),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def identity(user) -> Identity:
    return Identity(id=user.id, email=user.email, username=user.username)


@pytest.fixture()
def enabled_secret(db_session, user) -> str:
    """Give ``user`` an enabled second factor and return its secret."""
    secret = pyotp.random_base32()
    user.two_factor_secret = secret
    user.is_two_factor_enabled = True
    db_session.add(user)
    db_session.commit()
    return secret
