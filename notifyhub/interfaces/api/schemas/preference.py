"""Schemas for user preference endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChannelPreferenceRead(BaseModel):
    enabled: bool
    value: str | None = None
    verified: bool
    priority: int


class CategoryPreferencesSchema(BaseModel):
    marketing: bool
    transactional: bool
    alerts: bool


class FrequencyCapsSchema(BaseModel):
    max_per_day: int
    max_per_week: int


class DeliveryPreferencesRead(BaseModel):
    allowed_time_start: str
    allowed_time_end: str
    timezone: str
    categories: CategoryPreferencesSchema
    frequency: FrequencyCapsSchema


class PreferenceRead(BaseModel):
    id: str
    user_id: str
    channels: dict[str, ChannelPreferenceRead]
    preferences: DeliveryPreferencesRead
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ChannelPreferenceUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool | None = None
    value: str | None = None
    verified: bool | None = None
    priority: int | None = Field(default=None, ge=0)


class CategoryPreferencesUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    marketing: bool | None = None
    transactional: bool | None = None
    alerts: bool | None = None


class FrequencyCapsUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_per_day: int | None = Field(default=None, ge=0)
    max_per_week: int | None = Field(default=None, ge=0)


class DeliveryPreferencesUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    allowed_time_start: str | None = Field(default=None, examples=["08:00"])
    allowed_time_end: str | None = Field(default=None, examples=["22:00"])
    timezone: str | None = Field(default=None, examples=["America/Sao_Paulo"])
    categories: CategoryPreferencesUpdate | None = None
    frequency: FrequencyCapsUpdate | None = None


class PreferenceUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""

    channels: dict[str, ChannelPreferenceUpdate] | None = None
    preferences: DeliveryPreferencesUpdate | None = None


class OptRequest(BaseModel):
    channel: str
    action: str = Field(..., description="opt-in or opt-out")
    value: str | None = None


class VerifyRequest(BaseModel):
    channel: str


class PreferredChannelRead(BaseModel):
    channel: str
    value: str


class CanReceiveRead(BaseModel):
    user_id: str
    category: str
    allowed: bool


__all__ = [
    "CanReceiveRead",
    "ChannelPreferenceRead",
    "ChannelPreferenceUpdate",
    "DeliveryPreferencesRead",
    "DeliveryPreferencesUpdate",
    "OptRequest",
    "PreferenceRead",
    "PreferenceUpdate",
    "PreferredChannelRead",
    "VerifyRequest",
]
