"""
API request/response schemas for the app-facing endpoints.
Field names go over the wire in camelCase (userId, receivedAt, ...).
"""
import uuid
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hooklog.models.webhook import WebhookStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# === AUTH ===

class SignupRequest(BaseModel):
    email: str
    password: str
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(CamelModel):
    token: str
    user_id: uuid.UUID
    email: str


class UserResponse(CamelModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None


# === WEBHOOKS ===

class WebhookResponse(CamelModel):
    id: uuid.UUID
    payload: str
    source: str
    status: WebhookStatus
    error_message: Optional[str] = None
    user_id: Optional[uuid.UUID] = None
    received_at: int
    processed_at: Optional[int] = None


class WebhookCreateRequest(CamelModel):
    payload: str
    source: str
    user_id: Optional[uuid.UUID] = None


class WebhookStatusUpdate(CamelModel):
    status: WebhookStatus
    error_message: Optional[str] = None


class WebhookStatsResponse(CamelModel):
    total: int
    pending: int
    processed: int
    failed: int


class CreatedResponse(CamelModel):
    id: uuid.UUID


# === NUMBERS ===

class NumberRequest(BaseModel):
    value: float = Field(allow_inf_nan=False)


class NumberResponse(CamelModel):
    id: uuid.UUID
    value: float
    user_id: uuid.UUID
    created_at: int
