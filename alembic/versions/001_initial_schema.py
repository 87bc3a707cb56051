"""Initial schema - users, numbers and the webhook inbox.

Revision ID: 001
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # App accounts
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255)),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Demo number list
    op.create_table(
        "numbers",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("value", sa.Float, nullable=False),
        sa.Column(
            "user_id", sa.Uuid,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("created_at", sa.BigInteger, nullable=False),
    )
    op.create_index("numbers_by_user", "numbers", ["user_id"])

    # Webhook inbox - payload stored verbatim, timestamps in epoch ms
    op.create_table(
        "webhooks",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("payload", sa.Text, nullable=False),
        sa.Column("source", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("error_message", sa.Text, nullable=True),
        sa.Column(
            "user_id", sa.Uuid,
            sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("received_at", sa.BigInteger, nullable=False),
        sa.Column("processed_at", sa.BigInteger, nullable=True),
        sa.CheckConstraint(
            "status IN ('pending', 'processed', 'failed')", name="ck_webhooks_status"
        ),
    )
    op.create_index("by_source", "webhooks", ["source"])
    op.create_index("by_status", "webhooks", ["status"])
    op.create_index("by_user", "webhooks", ["user_id"])
    op.create_index("by_received_at", "webhooks", ["received_at"])


def downgrade() -> None:
    op.drop_index("by_received_at", table_name="webhooks")
    op.drop_index("by_user", table_name="webhooks")
    op.drop_index("by_status", table_name="webhooks")
    op.drop_index("by_source", table_name="webhooks")
    op.drop_table("webhooks")

    op.drop_index("numbers_by_user", table_name="numbers")
    op.drop_table("numbers")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
