import pytest
from fastapi.testclient import TestClient

from recruitment_api.config import Settings
from recruitment_api.context import build_context
from recruitment_api.main import create_app
from recruitment_api.services import auth_service
from recruitment_api.utils.database import init_db

TEST_SECRET = "test-signing-secret"


@pytest.fixture(scope="function")
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file, with cheap bcrypt."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest.fixture(scope="function")
async def ctx(settings):
    """Application context with the schema created."""
    ctx = build_context(settings)
    await init_db(ctx.engine)
    try:
        yield ctx
    finally:
        await ctx.engine.dispose()


@pytest.fixture(scope="function")
async def db(ctx):
    async with ctx.session_factory() as session:
        yield session


@pytest.fixture(scope="function")
def register_user(ctx, db):
    """Register through the auth flow and return the issued token."""

    async def _register(name="Ann", email="ann@x.com", password="secret1"):
        return await auth_service.register(
            db,
            ctx.tokens,
            name=name,
            email=email,
            password=password,
            bcrypt_rounds=ctx.settings.bcrypt_rounds,
        )

    return _register


@pytest.fixture(scope="function")
def client(settings):
    """TestClient over a fresh app; entering it runs the lifespan, which creates the tables."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
