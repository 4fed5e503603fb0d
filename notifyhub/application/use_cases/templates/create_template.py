"""Use case for creating templates."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

from sqlalchemy.orm import Session

from notifyhub.domain.entities import DEFAULT_TEMPLATE_CATEGORY, Template, TemplateVersion
from notifyhub.domain.exceptions import ValidationError
from notifyhub.infrastructure.repositories import DuplicateTemplateError, TemplateRepository
from notifyhub.utils import now_utc

from .validators import (
    ensure_category,
    ensure_channel,
    extract_placeholders,
    normalize_parameters,
    normalize_template_name,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewTemplateVersionData:
    """Input describing one channel version of a template."""

    channel: str
    content: str
    subject: str | None = None
    html: str | None = None
    parameters: Sequence[str] | None = None
    active: bool = True
    version_id: str | None = None


def build_versions(
    versions: Sequence[NewTemplateVersionData], *, created_at: datetime
) -> list[TemplateVersion]:
    """Validate ``versions`` and convert them into domain objects.

    When a version omits ``parameters`` they default to the placeholders
    found in its subject, content and html.
    """

    if not versions:
        raise ValidationError("A template needs at least one version")

    built: list[TemplateVersion] = []
    for data in versions:
        ensure_channel(data.channel)
        if not (data.content or "").strip():
            raise ValidationError(f"Template version for {data.channel} needs content")
        if data.parameters is None:
            parameters = extract_placeholders(data.subject, data.content, data.html)
        else:
            parameters = normalize_parameters(data.parameters)
        built.append(
            TemplateVersion(
                version_id=data.version_id or uuid4().hex,
                channel=data.channel,
                content=data.content,
                subject=data.subject,
                html=data.html,
                parameters=parameters,
                active=data.active,
                created_at=created_at,
            )
        )
    return built


def create_template(
    session: Session,
    *,
    name: str,
    versions: Sequence[NewTemplateVersionData],
    display_name: str | None = None,
    description: str | None = None,
    category: str = DEFAULT_TEMPLATE_CATEGORY,
    tags: Sequence[str] | None = None,
) -> Template:
    """Create a template with a unique ``name``."""

    repository = TemplateRepository(session)

    normalized_name = normalize_template_name(name)
    ensure_category(category)
    if repository.get_by_name(normalized_name) is not None:
        raise ValidationError(f"Template with name {normalized_name} already exists")

    now = now_utc()
    template = Template(
        id=None,
        name=normalized_name,
        versions=build_versions(versions, created_at=now),
        display_name=(display_name or "").strip() or normalized_name,
        description=description,
        category=category,
        tags=list(tags or []),
        created_at=now,
        updated_at=now,
    )

    try:
        saved_template = repository.create(template)
    except DuplicateTemplateError as exc:
        raise ValidationError(str(exc)) from exc
    logger.info("Template %s created with id %s", saved_template.name, saved_template.id)
    return saved_template
