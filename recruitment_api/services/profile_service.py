# recruitment_api/services/profile_service.py
import logging
from typing import Any, Dict, Union

from sqlalchemy.ext.asyncio import AsyncSession

from recruitment_api.errors import NotFoundError
from recruitment_api.models.user import User
from recruitment_api.schemas import ProfileUpdate, validate_payload
from recruitment_api.services import user_store

logger = logging.getLogger("recruitment_api.users")


async def get_profile(db: AsyncSession, current_user: User) -> User:
    """Re-read the caller's record; it may have been removed since the token was issued."""
    user = await user_store.get_user_by_id(db, current_user.id)
    if user is None:
        raise NotFoundError()
    return user


async def update_profile(
    db: AsyncSession,
    current_user: User,
    patch: Union[ProfileUpdate, Dict[str, Any]],
) -> User:
    """Apply only the fields present in ``patch``. Everything is validated before anything is written."""
    if not isinstance(patch, ProfileUpdate):
        patch = validate_payload(ProfileUpdate, patch)
    changes = patch.changes()

    user = await get_profile(db, current_user)
    user = await user_store.update_user_profile(db, user, changes)
    if changes:
        logger.info(f"Profile updated for {user.email}: {sorted(changes)}")
    return user
