"""
Webhook query and lifecycle operations.

Reads fail soft: an anonymous context gets [] (or None for single values)
rather than an error. Mutations other than create require an authenticated
context. None of these operations checks ownership of the record against
the caller; any signed-in user may read, update or remove any webhook.

Filtering, sorting and limiting load the full matching index set and work
in memory. That is fine for the table sizes this app sees.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from hooklog import store
from hooklog.config import get_settings
from hooklog.context import RequestContext
from hooklog.exceptions import (
    AuthenticationError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from hooklog.models.user import User
from hooklog.models.webhook import TERMINAL_STATUSES, WebhookRecord, WebhookStatus
from hooklog.utils.clock import now_ms
from hooklog.utils.logging import webhook_fields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebhookStats:
    total: int
    pending: int
    processed: int
    failed: int


def _newest_first(
    records: list[WebhookRecord], limit: Optional[int] = None
) -> list[WebhookRecord]:
    ordered = sorted(records, key=lambda r: r.received_at, reverse=True)
    if limit is not None and limit > 0:
        return ordered[:limit]
    return ordered


# === QUERIES ===

async def list_webhooks(
    db: AsyncSession,
    ctx: RequestContext,
    source: Optional[str] = None,
    status: Optional[WebhookStatus] = None,
    limit: Optional[int] = None,
) -> list[WebhookRecord]:
    """
    List webhooks newest first.

    Only one filter is applied: source wins when both are given.
    A positive limit keeps that many of the newest records.
    """
    if not ctx.is_authenticated:
        return []

    if source:
        records = await store.scan(db, "by_source", source)
    elif status:
        records = await store.scan(db, "by_status", status)
    else:
        records = await store.scan(db, "by_received_at")

    return _newest_first(records, limit)


async def get_webhook(
    db: AsyncSession, ctx: RequestContext, webhook_id: uuid.UUID
) -> Optional[WebhookRecord]:
    if not ctx.is_authenticated:
        return None
    return await store.get(db, webhook_id)


async def list_webhooks_by_user(
    db: AsyncSession, ctx: RequestContext, limit: Optional[int] = None
) -> list[WebhookRecord]:
    """The caller's own webhooks, newest first."""
    if not ctx.is_authenticated:
        return []
    records = await store.scan(db, "by_user", ctx.user_id)
    return _newest_first(records, limit)


async def get_stats(db: AsyncSession, ctx: RequestContext) -> Optional[WebhookStats]:
    """Global status counts. Not scoped to the caller."""
    if not ctx.is_authenticated:
        return None

    counts = await store.count_by_status(db)
    return WebhookStats(
        total=sum(counts.values()),
        pending=counts[WebhookStatus.PENDING.value],
        processed=counts[WebhookStatus.PROCESSED.value],
        failed=counts[WebhookStatus.FAILED.value],
    )


# === LIFECYCLE ===

async def record_inbound_webhook(
    db: AsyncSession, payload: str, source: str
) -> WebhookRecord:
    """Store a webhook from the public endpoint. No caller identity involved."""
    record = await store.insert(
        db, payload=payload, source=source, received_at=now_ms()
    )
    logger.info("Webhook stored from %s", source, extra=webhook_fields(record))
    return record


async def create_webhook(
    db: AsyncSession,
    ctx: RequestContext,
    payload: str,
    source: str,
    user_id: Optional[uuid.UUID] = None,
) -> WebhookRecord:
    """
    Explicitly record a webhook. Authentication is optional.

    The owner is user_id when given, otherwise the caller (if any).
    An explicit user_id must name an existing user.
    """
    if user_id is not None and await db.get(User, user_id) is None:
        raise ValidationError("Unknown user")

    owner = user_id if user_id is not None else ctx.user_id
    record = await store.insert(
        db, payload=payload, source=source, received_at=now_ms(), user_id=owner
    )
    logger.info("Webhook created from %s", source, extra=webhook_fields(record))
    return record


async def update_status(
    db: AsyncSession,
    ctx: RequestContext,
    webhook_id: uuid.UUID,
    status: WebhookStatus,
    error_message: Optional[str] = None,
) -> WebhookRecord:
    """
    Set a webhook's status and stamp processed_at.

    error_message is only written when non-empty, so an update can never
    clear a reason recorded by an earlier call.
    """
    if not ctx.is_authenticated:
        raise AuthenticationError()

    existing = await store.get(db, webhook_id)
    if existing is None:
        raise NotFoundError("Webhook not found")

    status = WebhookStatus(status)
    if get_settings().strict_status_transitions:
        current = WebhookStatus(existing.status)
        if current in TERMINAL_STATUSES and status != current:
            raise InvalidStatusTransitionError(
                f"Cannot move webhook from {current.value} to {status.value}"
            )

    changes = {"status": status, "processed_at": now_ms()}
    if error_message:
        changes["error_message"] = error_message

    record = await store.patch(db, webhook_id, **changes)
    logger.info("Webhook status set to %s", status.value, extra=webhook_fields(record))
    return record


async def remove_webhook(
    db: AsyncSession, ctx: RequestContext, webhook_id: uuid.UUID
) -> None:
    if not ctx.is_authenticated:
        raise AuthenticationError()

    if not await store.delete(db, webhook_id):
        raise NotFoundError("Webhook not found")
    logger.info("Webhook removed", extra={"webhook_id": str(webhook_id)})
