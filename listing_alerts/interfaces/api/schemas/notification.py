"""Pydantic models for the notification settings and delivery endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


class GlobalSettingsRead(BaseModel):
    id: int
    enabled: bool
    updated_at: datetime | None = None


class GlobalSettingsUpdate(BaseModel):
    enabled: bool


class OverrideUpsertRequest(BaseModel):
    """Target the user either by ``email`` or by ``user_id``."""

    email: EmailStr | None = None
    user_id: str | None = Field(default=None, min_length=1)
    mode: Literal["ALLOW", "BLOCK"]
    expires_at: datetime
    reason: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _require_target(self) -> "OverrideUpsertRequest":
        if not (self.email or self.user_id):
            raise ValueError("email or user_id is required")
        return self


class OverrideRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    mode: str
    expires_at: datetime
    reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RetryFailedRequest(BaseModel):
    max_retries: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1, le=500)


class RetryFailedResponse(BaseModel):
    message: str
    count: int
    total_recipients: int
    success_count: int
    failed_count: int


class PublishResponse(BaseModel):
    ad_id: str
    matched_count: int
    queued_count: int
    total_recipients: int
    success_count: int
    failed_count: int


class QueueSummaryRead(BaseModel):
    PENDING: int = 0
    SENDING: int = 0
    SENT: int = 0
    FAILED: int = 0


class NotificationStatusRead(BaseModel):
    can_receive: bool
    is_blocked: bool
    block_reason: str | None = None
    global_enabled: bool
    notify_enabled: bool
    override: OverrideRead | None = None


class SearchFilterPayload(BaseModel):
    """Saved search filter in the camelCase shape used by the web client."""

    model_config = ConfigDict(populate_by_name=True)

    category_ids: list[str] | None = Field(default=None, alias="categoryIds")
    city_ids: list[str] | None = Field(default=None, alias="cityIds")
    min_price: float | None = Field(default=None, alias="minPrice")
    max_price: float | None = Field(default=None, alias="maxPrice")
    property_types: list[str] | None = Field(default=None, alias="propertyTypes")
    publisher_types: list[Literal["OWNER", "BROKER"]] | None = Field(
        default=None, alias="publisherTypes"
    )


class PreferencesUpdate(BaseModel):
    notify_enabled: bool | None = Field(default=None, alias="notifyNewMatches")
    weekly_digest: bool | None = Field(default=None, alias="weeklyDigest")
    filters: SearchFilterPayload | None = None

    model_config = ConfigDict(populate_by_name=True)


class PreferencesRead(BaseModel):
    notify_new_matches: bool = Field(serialization_alias="notifyNewMatches")
    weekly_digest: bool = Field(serialization_alias="weeklyDigest")
    filters: dict | None = None


__all__ = [
    "GlobalSettingsRead",
    "GlobalSettingsUpdate",
    "NotificationStatusRead",
    "OverrideRead",
    "OverrideUpsertRequest",
    "PreferencesRead",
    "PreferencesUpdate",
    "PublishResponse",
    "QueueSummaryRead",
    "RetryFailedRequest",
    "RetryFailedResponse",
    "SearchFilterPayload",
]
