import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["SEED_ADMIN_ENABLED"] = "false"
os.environ["SEED_CATEGORIES_ENABLED"] = "false"
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import esnaf_defterim.models  # noqa: F401
from esnaf_defterim.core.security import create_access_token, hash_password
from esnaf_defterim.db.database import Base, get_db
from esnaf_defterim.main import app
from esnaf_defterim.models.user import User, UserRole

API = "/api"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def create_user(db, email="admin@kasap.com", password="admin123", role=UserRole.ADMIN, is_active=True, name=None):
    user = User(
        name=name or email.split("@")[0].title(),
        email=email,
        password_hash=hash_password(password),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_header(user):
    token = create_access_token(user_id=user.id, email=user.email, role=user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(db):
    return create_user(db)


@pytest.fixture
def admin_headers(admin):
    return auth_header(admin)


@pytest.fixture
def clerk_headers(db):
    return auth_header(create_user(db, email="kasiyer@kasap.com", role=UserRole.CLERK))


@pytest.fixture
def regular_headers(db):
    return auth_header(create_user(db, email="calisan@kasap.com", role=UserRole.REGULAR))
