"""Test fixtures: a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own Database handle on "sqlite+aiosqlite://" with a
   StaticPool, so every session shares one in-memory connection and the
   schema is created with Base.metadata.create_all.
2. The app is built with create_app(database=...) with no dependency
   overrides; the real get_db and the real session pipeline run.
3. Data is seeded through a small Factory that commits in its own
   short-lived sessions, and clients authenticate with real signed
   session cookies.

Session settings are set in the environment before anything from
productiveflow is imported, because config.settings is built at import.
"""

import os

os.environ.setdefault("PRODUCTIVEFLOW_SESSION_SECRET", "test-session-secret-not-for-production")
os.environ.setdefault("PRODUCTIVEFLOW_BCRYPT_ROUNDS", "4")
os.environ.setdefault("PRODUCTIVEFLOW_ENVIRONMENT", "test")

from contextlib import AsyncExitStack  # noqa: E402
from datetime import timedelta  # noqa: E402
from typing import Optional  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from productiveflow.auth.password import hash_password  # noqa: E402
from productiveflow.auth.tokens import SessionUser, issue_token  # noqa: E402
from productiveflow.config import settings  # noqa: E402
from productiveflow.db.engine import Database  # noqa: E402
from productiveflow.db.models import (  # noqa: E402
    Base,
    Organization,
    Project,
    Tag,
    Task,
    Team,
    TeamMember,
    TimeEntry,
    User,
)
from productiveflow.main import create_app  # noqa: E402

DEFAULT_PASSWORD = "correct-horse-battery"


class Factory:
    """Seed rows directly, each call in its own committed session."""

    def __init__(self, database: Database):
        self.database = database

    async def _save(self, obj):
        async with self.database.session() as s:
            s.add(obj)
            await s.commit()
        return obj

    async def org(self, name: str = "Acme") -> Organization:
        return await self._save(Organization(name=name))

    async def user(
        self,
        email: str,
        password: str = DEFAULT_PASSWORD,
        name: Optional[str] = None,
        org: Optional[Organization] = None,
        role: str = "MEMBER",
    ) -> User:
        return await self._save(
            User(
                email=email,
                name=name,
                password_hash=hash_password(password),
                org_id=org.id if org else None,
                role=role,
            )
        )

    async def project(
        self, org: Organization, members=(), name: str = "Website", status: str = "ACTIVE"
    ) -> Project:
        async with self.database.session() as s:
            users = [await s.get(User, m.id) for m in members]
            project = Project(org_id=org.id, name=name, status=status, users=users)
            s.add(project)
            await s.commit()
        return project

    async def task(
        self,
        project: Project,
        title: str = "Task",
        status: str = "TODO",
        priority: str = "MEDIUM",
        due_date=None,
        assignee: Optional[User] = None,
    ) -> Task:
        return await self._save(
            Task(
                project_id=project.id,
                title=title,
                status=status,
                priority=priority,
                due_date=due_date,
                assignee_id=assignee.id if assignee else None,
            )
        )

    async def tag(self, org: Organization, name: str = "bug", color: str = "#ff0000") -> Tag:
        return await self._save(Tag(org_id=org.id, name=name, color=color))

    async def team(
        self, org: Organization, members=(), projects=(), name: str = "Core"
    ) -> Team:
        """members: iterable of (user, role)."""
        async with self.database.session() as s:
            team = Team(org_id=org.id, name=name)
            team.projects = [await s.get(Project, p.id) for p in projects]
            s.add(team)
            await s.flush()
            for user, role in members:
                s.add(TeamMember(team_id=team.id, user_id=user.id, role=role))
            await s.commit()
        return team

    async def time_entry(self, task: Task, user: User, **fields) -> TimeEntry:
        return await self._save(
            TimeEntry(task_id=task.id, user_id=user.id, project_id=task.project_id, **fields)
        )


def session_cookie(user, ttl: timedelta = timedelta(hours=24), **kwargs) -> dict:
    """A cookie dict carrying a freshly signed token for `user`."""
    token = issue_token(SessionUser.from_user(user), ttl, **kwargs)
    return {settings.session_cookie_name: token}


@pytest_asyncio.fixture()
async def database():
    db = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    engine = await db.acquire()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield db
    finally:
        await db.shutdown()


@pytest_asyncio.fixture()
async def app(database):
    return create_app(database=database)


@pytest_asyncio.fixture()
async def factory(database):
    return Factory(database)


@pytest_asyncio.fixture()
async def db_session(database):
    """A plain session for assertions against stored rows."""
    async with database.session() as s:
        yield s


@pytest_asyncio.fixture()
async def client(app):
    """Anonymous HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def client_for(app):
    """Factory fixture: client_for(user) → client signed in as `user`.

    Learn: Clients carry a real signed session cookie, so the full
    verify → re-fetch → authorize pipeline runs on every request.
    """
    async with AsyncExitStack() as stack:

        async def _make(user, **kwargs) -> AsyncClient:
            transport = ASGITransport(app=app)
            return await stack.enter_async_context(
                AsyncClient(
                    transport=transport,
                    base_url="http://test",
                    cookies=session_cookie(user, **kwargs),
                )
            )

        yield _make


@pytest_asyncio.fixture()
async def org(factory):
    return await factory.org("Acme")


@pytest_asyncio.fixture()
async def admin(factory, org):
    return await factory.user("admin@acme.test", name="Ada Admin", org=org, role="ADMIN")


@pytest_asyncio.fixture()
async def member(factory, org):
    return await factory.user("member@acme.test", name="Mel Member", org=org)


@pytest_asyncio.fixture()
async def orgless(factory):
    return await factory.user("new@nowhere.test", name="Nora New")


@pytest_asyncio.fixture()
async def admin_client(client_for, admin):
    return await client_for(admin)


@pytest_asyncio.fixture()
async def member_client(client_for, member):
    return await client_for(member)
