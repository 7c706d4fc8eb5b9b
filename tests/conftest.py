"""
Shared test fixtures for the Sports Team Manager test suite.

Each test gets a fresh in-memory SQLite database (aiosqlite), a fresh
in-memory session store and a recording email sender.
"""

import os
import re
import sys
from dataclasses import dataclass
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["SESSION_BACKEND"] = "memory"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"  # keep scrypt cheap in tests
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("SENDGRID_API_KEY", None)

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.security import get_password_hash
from app.core.sessions import MemorySessionStore
from app.db.base import Base
from app.main import app
from app.models.team import Event, Player, Team
from app.models.user import Role, User
from app.services.email import EmailDispatchError, EmailSender

TOKEN_RE = re.compile(r"token=([A-Za-z0-9_\-]+)")
PASSWORD = "pw123456"


@dataclass
class SentEmail:
    to: str
    subject: str
    text: str
    html: str

    @property
    def token(self) -> str:
        match = TOKEN_RE.search(self.text)
        assert match, f"no token link in email: {self.text}"
        return match.group(1)


class RecordingEmailSender(EmailSender):
    """Keeps every message; set ``fail = True`` to simulate a provider outage."""

    def __init__(self) -> None:
        self.outbox: list[SentEmail] = []
        self.fail = False

    async def send(self, to: str, subject: str, text: str, html: str) -> None:
        if self.fail:
            raise EmailDispatchError("provider unavailable", status_code=503)
        self.outbox.append(SentEmail(to, subject, text, html))

    def last_to(self, email: str) -> SentEmail:
        return [m for m in self.outbox if m.to == email][-1]


# ── Database ────────────────────────────────────────────────────────
@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """A fresh in-memory database per test, wired into the app."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    yield factory
    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


# ── Process-wide collaborators ──────────────────────────────────────
@pytest.fixture
def mailer() -> RecordingEmailSender:
    sender = RecordingEmailSender()
    app.state.email_sender = sender
    return sender


@pytest.fixture
def session_store() -> MemorySessionStore:
    store = MemorySessionStore(idle_seconds=3600)
    app.state.session_store = store
    return store


@pytest.fixture
async def async_client(session_factory, mailer, session_store) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ── Helpers ─────────────────────────────────────────────────────────
async def create_user(
    session_factory,
    email: str,
    password: str = PASSWORD,
    role: Role = Role.READER,
    verified: bool = True,
) -> User:
    """Insert a user directly, bypassing the registration flow."""
    async with session_factory() as session:
        user = User(
            email=email,
            hashed_password=get_password_hash(password),
            role=role.value,
            email_verified=verified,
            verification_token=None if verified else f"tok-{email}",
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


async def create_team(session_factory, name: str = "Riverside FC", created_by_id: int = 1) -> Team:
    async with session_factory() as session:
        team = Team(name=name, created_by_id=created_by_id)
        session.add(team)
        await session.commit()
        await session.refresh(team)
        return team


async def create_player(
    session_factory, team_id: int, name: str, number: int, position: str = "MID"
) -> Player:
    async with session_factory() as session:
        player = Player(team_id=team_id, name=name, number=number, position=position)
        session.add(player)
        await session.commit()
        await session.refresh(player)
        return player


async def create_event(session_factory, team_id: int, **fields) -> Event:
    async with session_factory() as session:
        event = Event(team_id=team_id, **fields)
        session.add(event)
        await session.commit()
        await session.refresh(event)
        return event


async def login(client: AsyncClient, email: str, password: str = PASSWORD):
    resp = await client.post("/api/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp


@pytest.fixture
async def admin_client(async_client: AsyncClient, session_factory) -> AsyncClient:
    await create_user(session_factory, "admin@example.com", role=Role.ADMIN)
    await login(async_client, "admin@example.com")
    return async_client


@pytest.fixture
async def editor_client(async_client: AsyncClient, session_factory) -> AsyncClient:
    await create_user(session_factory, "editor@example.com", role=Role.EDITOR)
    await login(async_client, "editor@example.com")
    return async_client


@pytest.fixture
async def reader_client(async_client: AsyncClient, session_factory) -> AsyncClient:
    await create_user(session_factory, "reader@example.com", role=Role.READER)
    await login(async_client, "reader@example.com")
    return async_client
