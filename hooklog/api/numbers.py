"""
Number list endpoints - the demo CRUD list shown in the app.
"""
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hooklog.api.auth import get_request_context
from hooklog.context import RequestContext
from hooklog.database import get_db
from hooklog.schemas.api_responses import NumberRequest, NumberResponse
from hooklog.services import numbers as number_service

router = APIRouter(prefix="/api/v1/numbers", tags=["numbers"])


@router.get("", response_model=list[NumberResponse])
async def list_numbers(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    return await number_service.list_numbers(db, ctx)


@router.post("", response_model=NumberResponse)
async def create_number(
    payload: NumberRequest,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    return await number_service.create_number(db, ctx, payload.value)


@router.put("/{number_id}", response_model=NumberResponse)
async def update_number(
    number_id: uuid.UUID,
    payload: NumberRequest,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    return await number_service.update_number(db, ctx, number_id, payload.value)


@router.delete("/{number_id}")
async def remove_number(
    number_id: uuid.UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    await number_service.remove_number(db, ctx, number_id)
    return {"success": True}
