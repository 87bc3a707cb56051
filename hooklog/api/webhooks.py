"""
Webhook procedures for the app - list, inspect, create, update status, remove.

Reads never fail on a missing token: they return [] or null instead.
Mutations (other than create) answer 401 for anonymous callers.
"""
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hooklog.api.auth import get_request_context
from hooklog.context import RequestContext
from hooklog.database import get_db
from hooklog.models.webhook import WebhookStatus
from hooklog.schemas.api_responses import (
    CreatedResponse,
    WebhookCreateRequest,
    WebhookResponse,
    WebhookStatsResponse,
    WebhookStatusUpdate,
)
from hooklog.services import webhooks as webhook_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/webhooks", tags=["webhooks"])


@router.get("", response_model=list[WebhookResponse])
async def list_webhooks(
    source: Optional[str] = None,
    status: Optional[WebhookStatus] = None,
    limit: Optional[int] = None,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    """All webhooks newest first, filtered by source or (if no source) status."""
    return await webhook_service.list_webhooks(
        db, ctx, source=source, status=status, limit=limit
    )


@router.get("/mine", response_model=list[WebhookResponse])
async def list_my_webhooks(
    limit: Optional[int] = None,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    return await webhook_service.list_webhooks_by_user(db, ctx, limit=limit)


@router.get("/stats", response_model=Optional[WebhookStatsResponse])
async def webhook_stats(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    """Counts by status across every webhook."""
    stats = await webhook_service.get_stats(db, ctx)
    if stats is None:
        return None
    return WebhookStatsResponse(
        total=stats.total,
        pending=stats.pending,
        processed=stats.processed,
        failed=stats.failed,
    )


@router.get("/{webhook_id}", response_model=Optional[WebhookResponse])
async def get_webhook(
    webhook_id: uuid.UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    return await webhook_service.get_webhook(db, ctx, webhook_id)


@router.post("", response_model=CreatedResponse)
async def create_webhook(
    payload: WebhookCreateRequest,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    record = await webhook_service.create_webhook(
        db, ctx, payload=payload.payload, source=payload.source, user_id=payload.user_id
    )
    return CreatedResponse(id=record.id)


@router.patch("/{webhook_id}/status", response_model=WebhookResponse)
async def update_webhook_status(
    webhook_id: uuid.UUID,
    payload: WebhookStatusUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    return await webhook_service.update_status(
        db, ctx, webhook_id, status=payload.status, error_message=payload.error_message
    )


@router.delete("/{webhook_id}")
async def remove_webhook(
    webhook_id: uuid.UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    await webhook_service.remove_webhook(db, ctx, webhook_id)
    return {"success": True}
