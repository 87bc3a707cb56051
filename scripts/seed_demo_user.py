"""
Seed a demo user with a few numbers and webhooks so the app has data to show.

Idempotent: removes the existing demo user (and its rows) before recreating it.

Usage:
    python scripts/seed_demo_user.py
"""
import asyncio
import json
import logging
import random

from sqlalchemy import delete, select

from hooklog.api.auth import hash_password
from hooklog.context import RequestContext
from hooklog.database import Base, _get_engine, async_session_factory, dispose_engine
from hooklog.models.number import Number
from hooklog.models.user import User
from hooklog.models.webhook import WebhookRecord, WebhookStatus
from hooklog.services import numbers as number_service
from hooklog.services import webhooks as webhook_service

logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(message)s")
logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@hooklog.dev"
DEMO_PASSWORD = "DemoPass123!"
SOURCES = ["github", "stripe", "custom"]


async def seed():
    async with _get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as session:
        existing = (
            await session.execute(select(User).where(User.email == DEMO_EMAIL))
        ).scalar_one_or_none()
        if existing:
            await session.execute(delete(WebhookRecord).where(WebhookRecord.user_id == existing.id))
            await session.execute(delete(Number).where(Number.user_id == existing.id))
            await session.delete(existing)
            await session.flush()
            logger.info("Removed previous demo user")

        user = User(email=DEMO_EMAIL, password_hash=hash_password(DEMO_PASSWORD), name="Demo")
        session.add(user)
        await session.flush()
        ctx = RequestContext(user_id=user.id)

        for _ in range(5):
            await number_service.create_number(session, ctx, round(random.uniform(0, 100), 2))

        for i in range(10):
            source = random.choice(SOURCES)
            record = await webhook_service.create_webhook(
                session, ctx, payload=json.dumps({"seq": i, "source": source}), source=source
            )
            outcome = random.choice(list(WebhookStatus))
            if outcome == WebhookStatus.FAILED:
                await webhook_service.update_status(session, ctx, record.id, outcome, "timeout")
            elif outcome == WebhookStatus.PROCESSED:
                await webhook_service.update_status(session, ctx, record.id, outcome)

        await session.commit()

    await dispose_engine()

    logger.info("=" * 60)
    logger.info("Demo user seeded successfully!")
    logger.info("  Login:    %s / %s", DEMO_EMAIL, DEMO_PASSWORD)
    logger.info("=" * 60)


if __name__ == "__main__":
    asyncio.run(seed())
