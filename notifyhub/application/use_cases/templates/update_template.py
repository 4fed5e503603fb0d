"""Use case for updating templates."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from notifyhub.domain.entities import Template
from notifyhub.domain.exceptions import NotFoundError, ValidationError
from notifyhub.infrastructure.repositories import DuplicateTemplateError, TemplateRepository
from notifyhub.utils import now_utc

from .create_template import NewTemplateVersionData, build_versions
from .validators import ensure_category, normalize_template_name

logger = logging.getLogger(__name__)


def update_template(
    session: Session,
    template_id: str,
    *,
    name: str | None = None,
    display_name: str | None = None,
    description: str | None = None,
    category: str | None = None,
    tags: Sequence[str] | None = None,
    versions: Sequence[NewTemplateVersionData] | None = None,
) -> Template:
    """Update the given fields of a template.

    ``versions``, when provided, replaces the stored versions entirely.
    """

    repository = TemplateRepository(session)
    template = repository.get(template_id)
    if template is None:
        raise NotFoundError(f"Template not found: {template_id}")

    if name is not None:
        normalized_name = normalize_template_name(name)
        if normalized_name != template.name:
            existing = repository.get_by_name(normalized_name)
            if existing is not None and existing.id != template.id:
                raise ValidationError(f"Template with name {normalized_name} already exists")
        template.name = normalized_name
    if display_name is not None:
        template.display_name = display_name.strip() or template.name
    if description is not None:
        template.description = description
    if category is not None:
        template.category = ensure_category(category)
    if tags is not None:
        template.tags = list(tags)
    if versions is not None:
        template.versions = build_versions(versions, created_at=now_utc())

    try:
        updated = repository.update(template)
    except DuplicateTemplateError as exc:
        raise ValidationError(str(exc)) from exc
    logger.info("Template %s updated", updated.id)
    return updated
