"""
Shared test fixtures and configuration.

Every test gets a fresh in-memory SQLite database; the API client shares the
same session so tests can arrange rows directly and observe writes.
"""

import itertools
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, build_engine, get_db
from app.main import app
from app.models import BusinessProfile, Category, User, UserFollow, UserType
from app.services.auth_service import get_auth_service
from app.slugs import slugify


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
def engine():
    """Single-connection in-memory engine, so every session sees the same data."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


# ============================================================================
# Factories
# ============================================================================

@pytest.fixture(scope="session")
def password_hash():
    """bcrypt is slow; hash the shared test password once."""
    return get_auth_service().hash_password("secret-password")


@pytest.fixture
def make_user(db, password_hash):
    counter = itertools.count(1)

    def _make_user(user_type=UserType.END_USER.value, email=None, name=None, phone=None, is_active=True):
        n = next(counter)
        user = User(
            email=email or f"user{n}@example.com",
            hashed_password=password_hash,
            name=name or f"User {n}",
            user_type=user_type,
            phone=phone,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_profile(db, make_user):
    """Creates profiles with strictly increasing created_at."""
    counter = itertools.count(1)
    base_time = datetime(2024, 1, 1, 12, 0, 0)

    def _make_profile(name=None, latitude=None, longitude=None, owner=None, categories=(),
                      description=None, is_active=True):
        n = next(counter)
        owner = owner or make_user(user_type=UserType.BUSINESS.value)
        name = name or f"Business {n}"
        profile = BusinessProfile(
            user_id=owner.id,
            name=name,
            slug=f"{slugify(name)}-{n}",
            description=description,
            latitude=latitude,
            longitude=longitude,
            is_active=is_active,
            created_at=base_time + timedelta(seconds=n),
        )
        profile.categories = list(categories)
        db.add(profile)
        db.commit()
        return profile

    return _make_profile


@pytest.fixture
def make_category(db):
    def _make_category(name, color=None, is_active=True):
        category = Category(name=name, color=color, is_active=is_active)
        db.add(category)
        db.commit()
        return category

    return _make_category


@pytest.fixture
def make_follow(db):
    """Follow row inserted directly, bypassing role checks."""
    counter = itertools.count(1)
    base_time = datetime(2024, 1, 1, 12, 0, 0)

    def _make_follow(user, profile, email=True, sms=False, push=True):
        follow = UserFollow(
            user_id=user.id,
            business_profile_id=profile.id,
            email_notifications=email,
            sms_notifications=sms,
            push_notifications=push,
            created_at=base_time + timedelta(seconds=next(counter)),
        )
        db.add(follow)
        db.commit()
        return follow

    return _make_follow


@pytest.fixture
def business_user(make_user):
    return make_user(user_type=UserType.BUSINESS.value, email="owner@example.com", name="Owner")


@pytest.fixture
def end_user(make_user):
    return make_user(user_type=UserType.END_USER.value, email="visitor@example.com", name="Visitor",
                     phone="+5491100000000")


# ============================================================================
# API
# ============================================================================

@pytest.fixture
def client(db):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    api_client = TestClient(app)
    yield api_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        access_token, _ = get_auth_service().create_tokens(user)
        return {"Authorization": f"Bearer {access_token}"}

    return _auth_headers
