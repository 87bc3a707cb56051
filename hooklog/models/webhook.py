"""
Webhook record - every inbound webhook is stored verbatim before anything reads it.

The payload is kept as the exact text received (validated as JSON at ingestion,
never re-serialized). Status moves pending -> processed | failed via status updates.
Timestamps are integer milliseconds since the epoch.
"""
import enum
import uuid
from typing import Optional
from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from hooklog.database import Base


class WebhookStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({WebhookStatus.PROCESSED, WebhookStatus.FAILED})


class WebhookRecord(Base):
    __tablename__ = "webhooks"
    __table_args__ = (
        Index("by_source", "source"),
        Index("by_status", "status"),
        Index("by_user", "user_id"),
        Index("by_received_at", "received_at"),
        CheckConstraint(
            "status IN ('pending', 'processed', 'failed')", name="ck_webhooks_status"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=WebhookStatus.PENDING.value
    )
    error_message: Mapped[Optional[str]] = mapped_column(Text)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL")
    )
    received_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    processed_at: Mapped[Optional[int]] = mapped_column(BigInteger)

    def __repr__(self) -> str:
        return f"<WebhookRecord {self.id} source={self.source} status={self.status}>"
