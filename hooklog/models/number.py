"""
Number model - the demo list each signed-in user manages from the app.
"""
import uuid
from sqlalchemy import BigInteger, Float, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from hooklog.database import Base


class Number(Base):
    __tablename__ = "numbers"
    __table_args__ = (Index("numbers_by_user", "user_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
