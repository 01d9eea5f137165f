# recruitment_api/context.py
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from recruitment_api.config import Settings
from recruitment_api.services.auth_service import TokenService
from recruitment_api.utils.database import create_engine_and_sessionmaker


@dataclass
class AppContext:
    """Everything a request handler needs that lives for the whole process."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker
    tokens: TokenService


def build_context(settings: Settings) -> AppContext:
    engine, session_factory = create_engine_and_sessionmaker(settings.database_url)
    tokens = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(minutes=settings.jwt_expire_minutes),
    )
    return AppContext(settings=settings, engine=engine, session_factory=session_factory, tokens=tokens)
