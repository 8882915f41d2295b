import sys
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, Dict

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from feedback_collector.config import Settings  # noqa: E402

INVITATION_CODE = "TEST_CODE"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    db_path = tmp_path / "test.db"
    return Settings(
        database_url=f"sqlite+aiosqlite:///{db_path}",
        debug=True,
        jwt_secret="test-secret",
        admin_invitation_code=INVITATION_CODE,
    )


@pytest.fixture()
def app(settings: Settings):
    from feedback_collector.main import create_app
    return create_app(settings)


@pytest_asyncio.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac


@pytest_asyncio.fixture()
async def db_session(client: AsyncClient, settings: Settings) -> AsyncIterator[AsyncSession]:
    """Direct access to the app's database (tables exist once the client started)."""
    engine = create_async_engine(settings.database_url)
    async_session = async_sessionmaker(engine, expire_on_commit=False)
    async with async_session() as session:
        yield session
    await engine.dispose()


AdminFactory = Callable[..., Awaitable[Dict[str, str]]]


@pytest.fixture()
def make_admin(client: AsyncClient) -> AdminFactory:
    """Register an admin and return its Authorization header."""
    async def _make(username: str, email: str = "", password: str = "secret123") -> Dict[str, str]:
        resp = await client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@acme.io",
                "password": password,
                "adminCode": INVITATION_CODE,
            },
        )
        assert resp.status_code == 201, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}
    return _make


@pytest.fixture()
def make_type(client: AsyncClient):
    """Create a feedback type as the given admin and return its JSON."""
    async def _make(headers: Dict[str, str], name: str, **fields) -> dict:
        resp = await client.post("/api/feedback-types", json={"name": name, **fields}, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["feedbackType"]
    return _make


@pytest.fixture()
def submit(client: AsyncClient):
    """Submit public feedback and return the raw response."""
    async def _submit(type_name: str, message: str = "This is long enough", rating: int = 5, **fields):
        payload = {"type": type_name, "message": message, "rating": rating, **fields}
        return await client.post("/api/feedback", json=payload)
    return _submit
