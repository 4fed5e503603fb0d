"""Schemas for the health endpoint."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ServiceHealth(BaseModel):
    status: str
    timestamp: datetime
    version: str


class DatabaseHealth(BaseModel):
    status: str


class ChannelHealth(BaseModel):
    active: str | None = None
    providers: dict[str, bool]


class HealthRead(BaseModel):
    service: ServiceHealth
    database: DatabaseHealth
    providers: dict[str, ChannelHealth]


__all__ = ["ChannelHealth", "DatabaseHealth", "HealthRead", "ServiceHealth"]
