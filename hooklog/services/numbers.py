"""
Per-user number list. Unlike webhooks, every mutation checks that the
caller owns the row.
"""
import logging
import uuid
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hooklog.context import RequestContext
from hooklog.exceptions import AuthenticationError, NotAuthorizedError, NotFoundError
from hooklog.models.number import Number
from hooklog.utils.clock import now_ms

logger = logging.getLogger(__name__)


async def _get_owned(db: AsyncSession, ctx: RequestContext, number_id: uuid.UUID) -> Number:
    if not ctx.is_authenticated:
        raise AuthenticationError()

    number = await db.get(Number, number_id)
    if number is None:
        raise NotFoundError("Number not found")
    if number.user_id != ctx.user_id:
        raise NotAuthorizedError()
    return number


async def list_numbers(db: AsyncSession, ctx: RequestContext) -> list[Number]:
    """The caller's numbers, newest first. Anonymous callers get []."""
    if not ctx.is_authenticated:
        return []

    result = await db.execute(select(Number).where(Number.user_id == ctx.user_id))
    return sorted(result.scalars().all(), key=lambda n: n.created_at, reverse=True)


async def create_number(db: AsyncSession, ctx: RequestContext, value: float) -> Number:
    if not ctx.is_authenticated:
        raise AuthenticationError()

    number = Number(id=uuid.uuid4(), value=value, user_id=ctx.user_id, created_at=now_ms())
    db.add(number)
    await db.flush()
    return number


async def update_number(
    db: AsyncSession, ctx: RequestContext, number_id: uuid.UUID, value: float
) -> Number:
    number = await _get_owned(db, ctx, number_id)
    number.value = value
    await db.flush()
    return number


async def remove_number(db: AsyncSession, ctx: RequestContext, number_id: uuid.UUID) -> None:
    number = await _get_owned(db, ctx, number_id)
    await db.delete(number)
    await db.flush()
    logger.info("Number %s removed", number_id, extra={"user_id": str(ctx.user_id)})
