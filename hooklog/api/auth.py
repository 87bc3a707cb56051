"""
Auth endpoints - signup, login, current user.
Also provides the get_request_context dependency that resolves the caller.
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import bcrypt
import jwt
from fastapi import APIRouter, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from hooklog.config import get_settings
from hooklog.context import RequestContext
from hooklog.database import get_db
from hooklog.exceptions import AuthenticationError, ConflictError, ValidationError
from hooklog.models.user import User
from hooklog.schemas.api_responses import (
    LoginRequest,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
from hooklog.utils.logging import reset_log_user, set_log_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

# auto_error=False: a missing header means "anonymous", not 403
bearer_scheme = HTTPBearer(auto_error=False)

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        return False


def create_access_token(user_id: uuid.UUID) -> str:
    settings = get_settings()
    return jwt.encode(
        {
            "user_id": str(user_id),
            "exp": datetime.now(timezone.utc) + timedelta(hours=settings.jwt_expiry_hours),
        },
        settings.signing_key,
        algorithm="HS256",
    )


def decode_access_token(token: str) -> Optional[uuid.UUID]:
    """Return the user id carried by a valid token, or None."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.signing_key, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired token")
        return None
    except jwt.InvalidTokenError:
        logger.debug("Rejected invalid token")
        return None

    try:
        return uuid.UUID(payload.get("user_id"))
    except (ValueError, TypeError, AttributeError):
        return None


async def get_request_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> AsyncGenerator[RequestContext, None]:
    """
    Dependency yielding the caller's context.

    The caller's id is bound to log lines until the request finishes.
    """
    ctx = await resolve_request_context(credentials, db)
    token = set_log_user(ctx.user_id)
    try:
        yield ctx
    finally:
        reset_log_user(token)


async def resolve_request_context(
    credentials: Optional[HTTPAuthorizationCredentials], db: AsyncSession
) -> RequestContext:
    """
    Resolve the caller from an optional Bearer token.

    Anything short of a valid token for an active user yields the anonymous
    context; callers decide whether that is an error.
    """
    if credentials is None:
        return RequestContext.anonymous()

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        return RequestContext.anonymous()

    result = await db.execute(
        select(User.id).where(and_(User.id == user_id, User.is_active.is_(True)))
    )
    if result.scalar_one_or_none() is None:
        return RequestContext.anonymous()
    return RequestContext(user_id=user_id)


# === AUTH ===

@router.post("/signup", response_model=TokenResponse)
async def signup(payload: SignupRequest, db: AsyncSession = Depends(get_db)):
    """Create an account and return a token."""
    email = payload.email.strip().lower()
    if not email or "@" not in email:
        raise ValidationError("A valid email is required")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

    existing = await db.execute(select(User).where(User.email == email).limit(1))
    if existing.scalar_one_or_none():
        raise ConflictError("An account with this email already exists")

    user = User(
        id=uuid.uuid4(),
        email=email,
        password_hash=hash_password(payload.password),
        name=(payload.name or "").strip() or None,
    )
    db.add(user)
    await db.flush()
    logger.info("User signed up", extra={"user_id": str(user.id)})

    return TokenResponse(token=create_access_token(user.id), user_id=user.id, email=user.email)


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Authenticate and return a token."""
    email = payload.email.strip().lower()
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user or not user.is_active or not verify_password(payload.password, user.password_hash):
        raise AuthenticationError("Invalid credentials")

    return TokenResponse(token=create_access_token(user.id), user_id=user.id, email=user.email)


@router.get("/me", response_model=UserResponse)
async def me(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    if not ctx.is_authenticated:
        raise AuthenticationError()
    user = await db.get(User, ctx.user_id)
    return UserResponse.model_validate(user)
