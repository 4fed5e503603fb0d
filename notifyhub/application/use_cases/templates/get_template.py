"""Use cases for retrieving a single template."""

from __future__ import annotations

from sqlalchemy.orm import Session

from notifyhub.domain.entities import Template
from notifyhub.domain.exceptions import NotFoundError
from notifyhub.infrastructure.repositories import TemplateRepository


def get_template(session: Session, template_id: str) -> Template:
    """Return the template identified by ``template_id``."""

    template = TemplateRepository(session).get(template_id)
    if template is None:
        raise NotFoundError(f"Template not found: {template_id}")
    return template


def get_template_by_name(session: Session, name: str) -> Template:
    template = TemplateRepository(session).get_by_name(name.strip())
    if template is None:
        raise NotFoundError(f"Template not found: {name}")
    return template
