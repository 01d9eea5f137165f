# recruitment_api/deps.py
import logging
from typing import AsyncIterator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment_api.context import AppContext
from recruitment_api.errors import InvalidTokenError, Unauthorized
from recruitment_api.models.user import User
from recruitment_api.services import user_store
from recruitment_api.services.auth_service import TokenService

logger = logging.getLogger("recruitment_api.guard")


def get_context(request: Request) -> AppContext:
    return request.app.state.ctx


async def get_db(ctx: AppContext = Depends(get_context)) -> AsyncIterator[AsyncSession]:
    async with ctx.session_factory() as session:
        yield session


async def authenticate(authorization: Optional[str], db: AsyncSession, tokens: TokenService) -> User:
    """
    Resolve an ``Authorization: Bearer <token>`` header to a stored user.
    Every failure is the same Unauthorized; the reason is only logged.
    """
    if not authorization:
        logger.info("Rejected request: missing authorization header")
        raise Unauthorized()
    parts = authorization.split()
    if len(parts) != 2 or parts[0] != "Bearer":
        logger.info("Rejected request: malformed authorization header")
        raise Unauthorized()

    try:
        user_id = tokens.verify(parts[1])
    except InvalidTokenError as exc:
        logger.info(f"Rejected request: invalid token ({type(exc.__cause__ or exc).__name__})")
        raise Unauthorized() from exc

    user = await user_store.get_user_by_id(db, user_id)
    if user is None:
        logger.info(f"Rejected request: token subject {user_id} no longer exists")
        raise Unauthorized()
    return user


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    ctx: AppContext = Depends(get_context),
) -> User:
    """
    Expect Authorization: Bearer <token>
    Returns User instance or raises 401.
    """
    return await authenticate(authorization, db, ctx.tokens)
