"""Schemas for template endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from notifyhub.application.use_cases.templates import NewTemplateVersionData


class TemplateVersionCreate(BaseModel):
    channel: str
    content: str = Field(..., min_length=1)
    subject: str | None = None
    html: str | None = None
    parameters: list[str] | None = Field(
        default=None,
        description="Required parameters; derived from the placeholders when omitted",
    )
    active: bool = True
    version_id: str | None = None

    def to_data(self) -> NewTemplateVersionData:
        return NewTemplateVersionData(**self.model_dump())


class TemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    display_name: str | None = Field(default=None, max_length=150)
    description: str | None = Field(default=None, max_length=500)
    category: str = "transactional"
    tags: list[str] = Field(default_factory=list)
    versions: list[TemplateVersionCreate] = Field(..., min_length=1)


class TemplateUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=100)
    display_name: str | None = Field(default=None, max_length=150)
    description: str | None = Field(default=None, max_length=500)
    category: str | None = None
    tags: list[str] | None = None
    versions: list[TemplateVersionCreate] | None = None


class TemplateVersionRead(BaseModel):
    version_id: str
    channel: str
    subject: str | None = None
    content: str
    html: str | None = None
    parameters: list[str]
    active: bool
    created_at: datetime | None = None


class TemplateRead(BaseModel):
    id: str
    name: str
    display_name: str | None = None
    description: str | None = None
    category: str
    tags: list[str]
    versions: list[TemplateVersionRead]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TemplatePage(BaseModel):
    items: list[TemplateRead]
    total: int
    page: int
    limit: int
    pages: int


class TemplateRenderRequest(BaseModel):
    channel: str
    parameters: dict[str, Any] = Field(default_factory=dict)


class RenderedContentRead(BaseModel):
    text: str
    subject: str | None = None
    html: str | None = None


__all__ = [
    "RenderedContentRead",
    "TemplateCreate",
    "TemplatePage",
    "TemplateRead",
    "TemplateRenderRequest",
    "TemplateUpdate",
    "TemplateVersionCreate",
    "TemplateVersionRead",
]
