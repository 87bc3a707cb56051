"""
API router - aggregates all route modules.
"""
from fastapi import APIRouter
from hooklog.api.ingest import router as ingest_router
from hooklog.api.auth import router as auth_router
from hooklog.api.webhooks import router as webhooks_router
from hooklog.api.numbers import router as numbers_router
from hooklog.api.health import router as health_router

api_router = APIRouter()
api_router.include_router(ingest_router)
api_router.include_router(auth_router)
api_router.include_router(webhooks_router)
api_router.include_router(numbers_router)
api_router.include_router(health_router)
