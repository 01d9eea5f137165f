# recruitment_api/services/user_store.py
import logging
import uuid
from typing import Any, Dict, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from recruitment_api.errors import DuplicateEmailError, ServerError
from recruitment_api.models.user import Role, User, utcnow

logger = logging.getLogger("recruitment_api.user_store")

PROFILE_FIELDS = ("name", "skills", "experience", "education")


def _parse_id(user_id: Union[str, uuid.UUID]) -> Optional[uuid.UUID]:
    if isinstance(user_id, uuid.UUID):
        return user_id
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    try:
        q = await db.execute(select(User).filter_by(email=email))
    except SQLAlchemyError as exc:
        raise ServerError() from exc
    return q.scalars().first()


async def get_user_by_id(db: AsyncSession, user_id: Union[str, uuid.UUID]) -> Optional[User]:
    uid = _parse_id(user_id)
    if uid is None:
        return None
    try:
        q = await db.execute(select(User).filter_by(id=uid))
    except SQLAlchemyError as exc:
        raise ServerError() from exc
    return q.scalars().first()


async def create_user(db: AsyncSession, *, name: str, email: str, password_hash: str) -> User:
    """Insert a new user. The unique email index decides races between concurrent registrations."""
    if await get_user_by_email(db, email) is not None:
        raise DuplicateEmailError()

    now = utcnow()
    user = User(
        name=name,
        email=email,
        password_hash=password_hash,
        role=Role.USER,
        skills=[],
        experience=0,
        education="",
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        # only the email index makes this a duplicate; any other constraint is a server fault
        if await get_user_by_email(db, email) is None:
            raise ServerError() from exc
        logger.info(f"Unique constraint rejected duplicate email: {email}")
        raise DuplicateEmailError() from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        raise ServerError() from exc
    return user


async def update_user_profile(db: AsyncSession, user: User, fields: Dict[str, Any]) -> User:
    """Apply profile fields in one commit. Unknown keys are refused."""
    unknown = set(fields) - set(PROFILE_FIELDS)
    if unknown:
        raise ValueError(f"not profile fields: {sorted(unknown)}")
    if not fields:
        return user

    for key, value in fields.items():
        setattr(user, key, value)
    user.updated_at = utcnow()
    db.add(user)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise ServerError() from exc
    return user
