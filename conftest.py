"""Shared pytest fixtures: in-memory SQLite database, users, catalog rows and an API client."""

import itertools
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers every model on Base.metadata
from app.core.roles import ChannelType, Role
from app.core.security import create_access_token, get_password_hash
from app.database import Base, configure_sqlite_engine
from app.models import Category, Channel, User


@pytest.fixture(scope="session")
def password_hash():
    return get_password_hash("password123")


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite_engine(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db, password_hash):
    counter = itertools.count(1)

    def _make(role=Role.ECG_MEMBER, username=None):
        n = next(counter)
        user = User(
            username=username or f"user{n}",
            email=f"{username or f'user{n}'}@example.com",
            password_hash=password_hash,
            role=Role(role).value,
            bio="",
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(Role.SERVER_ADMIN, username="admin")


@pytest.fixture
def make_category(db):
    counter = itertools.count(0)

    def _make(name=None):
        n = next(counter)
        category = Category(name=name or f"Category {n}", display_order=n, is_collapsed=False)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture
def make_channel(db):
    counter = itertools.count(0)

    def _make(category, channel_type=ChannelType.ALL_POST_ALL_VIEW, name=None):
        n = next(counter)
        channel = Channel(
            category_id=category.id,
            name=name or f"channel-{n}",
            description="",
            channel_type=getattr(channel_type, "value", channel_type),
            display_order=n,
        )
        db.add(channel)
        db.commit()
        db.refresh(channel)
        return channel

    return _make


@pytest.fixture
def client(db):
    from app.api.deps import get_db
    from app.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token(data={"sub": str(user.id), "role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _headers
