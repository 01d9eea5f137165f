# recruitment_api/routers/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment_api.deps import get_current_user, get_db
from recruitment_api.models.user import User
from recruitment_api.schemas import ProfileUpdate, public_user
from recruitment_api.services import profile_service

# every route here requires a bearer token
router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(get_current_user)])


@router.get("/profile")
async def get_profile(db: AsyncSession = Depends(get_db), current_user: User = Depends(get_current_user)):
    user = await profile_service.get_profile(db, current_user)
    return {"success": True, "data": public_user(user)}


@router.put("/profile")
async def update_profile(
    payload: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = await profile_service.update_profile(db, current_user, payload)
    return {"success": True, "data": public_user(user)}
