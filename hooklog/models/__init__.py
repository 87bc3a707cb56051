"""
Database models - import all models here so Alembic can discover them.
"""
from hooklog.models.user import User
from hooklog.models.number import Number
from hooklog.models.webhook import WebhookRecord, WebhookStatus

__all__ = [
    "User",
    "Number",
    "WebhookRecord",
    "WebhookStatus",
]
