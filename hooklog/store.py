"""
Record store for webhook records.

Thin data-access layer over an AsyncSession. Every mutation is a single
flush, so insert/patch/delete are atomic per record. Nothing here checks
identity or ownership; that belongs to the service layer.

Secondary access paths map onto the named indexes of the webhooks table:
    by_source       equality on source
    by_status       equality on status
    by_user         equality on user_id
    by_received_at  unfiltered scan ordered by received_at
"""
import logging
import uuid
from typing import Any, Optional
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hooklog.models.webhook import WebhookRecord, WebhookStatus

logger = logging.getLogger(__name__)

INDEXES = {
    "by_source": WebhookRecord.source,
    "by_status": WebhookRecord.status,
    "by_user": WebhookRecord.user_id,
    "by_received_at": WebhookRecord.received_at,
}

# Columns that only the store may set
_IMMUTABLE_FIELDS = frozenset({"id", "received_at"})
_PATCHABLE_FIELDS = frozenset(
    {"payload", "source", "status", "error_message", "user_id", "processed_at"}
)


def _status_value(status: Any) -> str:
    return status.value if isinstance(status, WebhookStatus) else WebhookStatus(status).value


async def insert(
    db: AsyncSession,
    *,
    payload: str,
    source: str,
    received_at: int,
    status: WebhookStatus = WebhookStatus.PENDING,
    user_id: Optional[uuid.UUID] = None,
) -> WebhookRecord:
    """Insert a new record and return it with its assigned id."""
    record = WebhookRecord(
        id=uuid.uuid4(),
        payload=payload,
        source=source,
        status=_status_value(status),
        user_id=user_id,
        received_at=received_at,
    )
    db.add(record)
    await db.flush()
    return record


async def get(db: AsyncSession, record_id: uuid.UUID) -> Optional[WebhookRecord]:
    return await db.get(WebhookRecord, record_id)


async def patch(
    db: AsyncSession, record_id: uuid.UUID, **fields: Any
) -> Optional[WebhookRecord]:
    """Update only the given fields. Returns None if the record does not exist."""
    illegal = set(fields) & _IMMUTABLE_FIELDS
    if illegal:
        raise ValueError(f"Cannot patch immutable field(s): {sorted(illegal)}")
    unknown = set(fields) - _PATCHABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown field(s): {sorted(unknown)}")

    record = await db.get(WebhookRecord, record_id)
    if record is None:
        return None

    if "status" in fields:
        fields["status"] = _status_value(fields["status"])
    for name, value in fields.items():
        setattr(record, name, value)
    await db.flush()
    return record


async def delete(db: AsyncSession, record_id: uuid.UUID) -> bool:
    record = await db.get(WebhookRecord, record_id)
    if record is None:
        return False
    await db.delete(record)
    await db.flush()
    return True


async def scan(
    db: AsyncSession, index: str, key: Any = None
) -> list[WebhookRecord]:
    """
    Load every record reachable through one index.

    Equality indexes require a key. by_received_at ignores the key and
    returns the whole table in ascending received_at order.
    """
    column = INDEXES.get(index)
    if column is None:
        raise ValueError(f"Unknown index: {index}")

    query = select(WebhookRecord)
    if index == "by_received_at":
        query = query.order_by(column.asc())
    else:
        if index == "by_status":
            key = _status_value(key)
        query = query.where(column == key)

    result = await db.execute(query)
    return list(result.scalars().all())


async def count_by_status(db: AsyncSession) -> dict[str, int]:
    """Count records per status over the whole table."""
    result = await db.execute(
        select(WebhookRecord.status, func.count()).group_by(WebhookRecord.status)
    )
    counts = {status.value: 0 for status in WebhookStatus}
    for status, count in result.all():
        counts[status] = count
    return counts
