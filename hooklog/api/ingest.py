"""
Public webhook endpoint - receives payloads from external senders.

POST /webhook
- Body must be valid JSON text. It is parsed only to validate it and stored
  exactly as received, minus a leading UTF-8 BOM.
- Optional X-Webhook-Source header tags the record (default "unknown").
- No authentication: senders are external services, not app users.
- No signature check, no dedup: a redelivery is stored as a new record.

Response bodies are fixed so callers can rely on them:
- 200 {"success": true, "message": ..., "webhookId": ...}
- 400 {"error": "Invalid JSON payload"}
- 405 {"error": "Method not allowed. Use POST."} with Allow: POST
- 500 {"error": "Internal server error"}
"""
import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hooklog.config import get_settings
from hooklog.database import get_db
from hooklog.services.webhooks import record_inbound_webhook

logger = logging.getLogger(__name__)
router = APIRouter(tags=["ingest"])

# Methods routed here only so they can be answered with 405
_REJECTED_METHODS = ["GET", "PUT", "PATCH", "DELETE"]


def _reject_constant(name: str):
    # JSON has no NaN/Infinity literals even though Python's parser accepts them
    raise ValueError(f"Invalid JSON constant: {name}")


def is_valid_json(body: bytes) -> bool:
    """Parse-and-discard validation of a raw request body."""
    try:
        json.loads(body.decode("utf-8-sig"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError):
        return False
    return True


@router.api_route("/webhook", methods=["POST", *_REJECTED_METHODS])
async def receive_webhook(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Validate an inbound webhook and store it as a pending record."""
    if request.method != "POST":
        return JSONResponse(
            status_code=405,
            content={"error": "Method not allowed. Use POST."},
            headers={"Allow": "POST"},
        )

    settings = get_settings()
    source = request.headers.get(settings.webhook_source_header) or settings.default_webhook_source

    body = await request.body()
    if not is_valid_json(body):
        logger.info("Rejected webhook with invalid JSON", extra={"source": source})
        return JSONResponse(status_code=400, content={"error": "Invalid JSON payload"})

    try:
        record = await record_inbound_webhook(db, payload=body.decode("utf-8-sig"), source=source)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(
            "Error processing webhook: %s", str(e), exc_info=True,
            extra={"source": source},
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return JSONResponse(
        status_code=200,
        content={
            "success": True,
            "message": "Webhook received successfully",
            "webhookId": str(record.id),
        },
    )
