"""
Pytest fixtures for the NFC Link Manager API.

Every test gets its own in-memory SQLite database. The app's get_db
dependency is overridden to hand out sessions on that database, so no
external store is needed.
"""
from datetime import timedelta

import pyotp
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

import nfclink.models  # noqa: F401
from nfclink.db.base import Base, utcnow
from nfclink.db.session import create_session_factory, get_db
from nfclink.main import app
from nfclink.models import TwoFactorAuth, User
from nfclink.security import hashing, totp
from nfclink.security.recovery_codes import generate_recovery_codes

API = "http://test/api/v1"
PASSWORD = "SecurePass123!@#"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    """A session for seeding and inspecting the database from tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """API client bound to the per-test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url=API) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db):
    """Factory fixture to create users."""
    async def _create_user(email="test@example.com", password=PASSWORD, name="Test User"):
        user = User(name=name, email=email, password_hash=hashing.get_password_hash(password))
        db.add(user)
        await db.commit()
        return user
    return _create_user


@pytest.fixture
async def user(create_user):
    return await create_user()


@pytest.fixture
def enable_two_factor(db):
    """Give a user an enabled second factor; returns the stored record."""
    async def _enable(user, codes=None):
        record = TwoFactorAuth(
            user_id=user.id,
            secret=totp.generate_totp_secret(),
            is_enabled=True,
            recovery_codes=codes if codes is not None else generate_recovery_codes(10),
        )
        db.add(record)
        await db.commit()
        return record
    return _enable


@pytest.fixture
def fetch(db):
    """Fresh read of all rows of `model` matching `criteria`."""
    async def _fetch(model, *criteria):
        result = await db.execute(
            select(model)
            .where(*criteria)
            .order_by(model.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())
    return _fetch


def invalid_totp(secret):
    """A well-formed code that is not accepted for `secret` right now."""
    generator = pyotp.TOTP(secret)
    now = utcnow()
    accepted = {generator.at(now + timedelta(seconds=30 * step)) for step in (-1, 0, 1)}
    for candidate in ("000000", "111111", "222222", "333333"):
        if candidate not in accepted:
            return candidate
