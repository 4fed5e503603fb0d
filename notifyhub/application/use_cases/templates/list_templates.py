"""Use case for listing templates."""

from __future__ import annotations

from sqlalchemy.orm import Session

from notifyhub.application.use_cases.pagination import Page, offset_for, validate_pagination
from notifyhub.domain.entities import Template
from notifyhub.infrastructure.repositories import TemplateRepository

from .validators import ensure_category, ensure_channel


def list_templates(
    session: Session,
    *,
    category: str | None = None,
    channel: str | None = None,
    search: str | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> Page[Template]:
    """Return one page of templates, most recently updated first."""

    page, limit = validate_pagination(page, limit)
    if category:
        ensure_category(category)
    if channel:
        ensure_channel(channel)

    templates = TemplateRepository(session).find(
        category=category, channel=channel, search=search
    )
    start = offset_for(page, limit)
    return Page(
        items=list(templates[start : start + limit]),
        total=len(templates),
        page=page,
        limit=limit,
    )
