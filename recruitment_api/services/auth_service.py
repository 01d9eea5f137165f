# recruitment_api/services/auth_service.py
import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

import bcrypt
import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment_api.errors import InvalidCredentialsError, InvalidTokenError, ServerError
from recruitment_api.schemas import LoginIn, RegisterIn, validate_payload
from recruitment_api.services import user_store

logger = logging.getLogger("recruitment_api.auth")


# ---------------- PASSWORD HASHING ----------------

def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash or oversized input
        return False


# ---------------- JWT TOKENS ----------------

class TokenService:
    """Issues and verifies signed, time-limited bearer tokens carrying a user id."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=30)):
        if not secret:
            raise ValueError("jwt_secret_blank")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def __repr__(self) -> str:
        return f"TokenService(algorithm={self.algorithm!r}, ttl={self.ttl!r})"

    def issue(self, user_id: Union[str, uuid.UUID], expires_delta: Optional[timedelta] = None) -> str:
        """Generate JWT token for a user."""
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self.ttl)
        payload = {"sub": str(user_id), "iat": now, "exp": expire}
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """Return the user id a valid token was issued for."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc
        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub:
            raise InvalidTokenError()
        return sub


# ---------------- REGISTER / LOGIN ----------------

async def register(
    db: AsyncSession,
    tokens: TokenService,
    *,
    name: str,
    email: str,
    password: str,
    bcrypt_rounds: int = 12,
) -> str:
    """Create a user with the default role and return a token for it."""
    data = validate_payload(RegisterIn, {"name": name, "email": email, "password": password})
    return await register_validated(db, tokens, data, bcrypt_rounds=bcrypt_rounds)


async def register_validated(db: AsyncSession, tokens: TokenService, data: RegisterIn, bcrypt_rounds: int = 12) -> str:
    """Same as ``register`` for input FastAPI has already run through RegisterIn."""
    # bcrypt is CPU bound; keep it off the event loop
    loop = asyncio.get_running_loop()
    try:
        password_hash = await loop.run_in_executor(None, hash_password, data.password, bcrypt_rounds)
    except ValueError as exc:
        raise ServerError() from exc

    user = await user_store.create_user(db, name=data.name, email=data.email, password_hash=password_hash)
    logger.info(f"User registered successfully: {data.email}")
    return tokens.issue(user.id)


async def login(db: AsyncSession, tokens: TokenService, *, email: str, password: str) -> str:
    """Check credentials and return a fresh token. Unknown email and wrong password look the same."""
    data = validate_payload(LoginIn, {"email": email, "password": password})
    return await login_validated(db, tokens, data)


async def login_validated(db: AsyncSession, tokens: TokenService, data: LoginIn) -> str:
    """Same as ``login`` for input FastAPI has already run through LoginIn."""
    user = await user_store.get_user_by_email(db, data.email)
    matches = False
    if user is not None:
        loop = asyncio.get_running_loop()
        matches = await loop.run_in_executor(None, verify_password, data.password, user.password_hash)
    if not matches:
        logger.info(f"Failed login for email: {data.email}")
        raise InvalidCredentialsError()

    logger.info(f"User logged in successfully: {data.email}")
    return tokens.issue(user.id)
