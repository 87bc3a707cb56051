"""
Structured logging with per-request correlation and caller identity.

JSON lines carry: timestamp, level, correlation_id, user_id, module, message,
plus any whitelisted extras (see EXTRA_FIELDS). The correlation id is set by
CorrelationIdMiddleware; the user id by get_request_context for the lifetime
of the request. Both live in contextvars and are reset by token afterwards.
"""
import json
import logging
import uuid
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Optional

correlation_id_ctx: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
log_user_ctx: ContextVar[Optional[str]] = ContextVar("log_user_id", default=None)

# Attributes copied from `extra=` onto the JSON line
EXTRA_FIELDS = ("webhook_id", "user_id", "source", "status", "error_code")

TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(correlation_id)s] %(name)s: %(message)s"


def get_correlation_id() -> Optional[str]:
    return correlation_id_ctx.get()


def set_correlation_id(cid: str) -> Token:
    """Bind a correlation id to the current context. Returns a token for reset."""
    return correlation_id_ctx.set(cid)


def reset_correlation_id(token: Token) -> None:
    correlation_id_ctx.reset(token)


def generate_correlation_id() -> str:
    """UUID4 hex, 32 chars."""
    return uuid.uuid4().hex


def set_log_user(user_id: Optional[uuid.UUID]) -> Token:
    """Bind the caller's id to the current context. Returns a token for reset."""
    return log_user_ctx.set(str(user_id) if user_id is not None else None)


def reset_log_user(token: Token) -> None:
    log_user_ctx.reset(token)


def webhook_fields(record: Any) -> dict[str, str]:
    """`extra=` payload describing a webhook record."""
    return {
        "webhook_id": str(record.id),
        "source": record.source,
        "status": record.status,
    }


class StructuredJsonFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "correlation_id": get_correlation_id(),
            "module": record.name,
            "message": record.getMessage(),
        }

        user_id = log_user_ctx.get()
        if user_id:
            log_entry["user_id"] = user_id

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Explicit extras win over context values
        for key in EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val

        return json.dumps(log_entry, default=str)


class CorrelationIdFilter(logging.Filter):
    """Exposes the correlation id to %-style text formats."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_structured_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """
    Install a single stdout handler on the root logger.

    log_format="json" (default) emits StructuredJsonFormatter lines;
    "text" emits a readable single-line format for local runs.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    if log_format.lower() == "text":
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
        handler.addFilter(CorrelationIdFilter())
    else:
        handler.setFormatter(StructuredJsonFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "httpcore", "httpx", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
