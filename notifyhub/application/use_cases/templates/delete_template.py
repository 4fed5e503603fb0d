"""Use case for deleting templates."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from notifyhub.domain.exceptions import NotFoundError
from notifyhub.infrastructure.repositories import TemplateRepository

logger = logging.getLogger(__name__)


def delete_template(session: Session, template_id: str) -> None:
    """Delete the template identified by ``template_id``."""

    if not TemplateRepository(session).delete(template_id):
        raise NotFoundError(f"Template not found: {template_id}")
    logger.info("Template %s deleted", template_id)
