# recruitment_api/routers/auth.py
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment_api.context import AppContext
from recruitment_api.deps import get_context, get_current_user, get_db
from recruitment_api.models.user import User
from recruitment_api.schemas import LoginIn, RegisterIn, public_user
from recruitment_api.services import auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = logging.getLogger("recruitment_api.auth")


# ---------------------- ROUTES ----------------------
@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterIn,
    db: AsyncSession = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    logger.info(f"POST /register received for email: {payload.email}")
    token = await auth_service.register_validated(db, ctx.tokens, payload, bcrypt_rounds=ctx.settings.bcrypt_rounds)
    return {"success": True, "token": token}


@router.post("/login")
async def login(
    payload: LoginIn,
    db: AsyncSession = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    logger.info(f"POST /login received for email: {payload.email}")
    token = await auth_service.login_validated(db, ctx.tokens, payload)
    return {"success": True, "token": token}


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": public_user(current_user)}
