"""Persistence helpers for template entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from uuid import uuid4

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notifyhub.domain.entities import Template, TemplateVersion
from notifyhub.infrastructure.models import TemplateModel
from notifyhub.utils import ensure_utc, now_utc, parse_isoformat, to_isoformat


class DuplicateTemplateError(Exception):
    """Raised when another template already uses the same name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Template name {name!r} is already in use")
        self.name = name


class TemplateRepository:
    """Provide CRUD operations for :class:`Template` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, template_id: str) -> Template | None:
        model = self.session.get(TemplateModel, template_id)
        if model is None:
            return None
        return self._to_entity(model)

    def get_by_name(self, name: str) -> Template | None:
        model = (
            self.session.query(TemplateModel)
            .filter(TemplateModel.name == name)
            .first()
        )
        if model is None:
            return None
        return self._to_entity(model)

    def find(
        self,
        *,
        category: str | None = None,
        channel: str | None = None,
        search: str | None = None,
    ) -> Sequence[Template]:
        """Return templates matching the filters, most recently updated first.

        ``channel`` matches templates owning at least one version for it; the
        versions live in a JSON column, so that filter runs in Python.
        """

        query = self.session.query(TemplateModel)
        if category:
            query = query.filter(TemplateModel.category == category)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    TemplateModel.name.ilike(pattern),
                    TemplateModel.display_name.ilike(pattern),
                    TemplateModel.description.ilike(pattern),
                )
            )
        query = query.order_by(TemplateModel.updated_at.desc(), TemplateModel.id.desc())
        templates = [self._to_entity(model) for model in query.all()]
        if channel:
            templates = [
                template
                for template in templates
                if any(version.channel == channel for version in template.versions)
            ]
        return templates

    def create(self, template: Template) -> Template:
        model = TemplateModel()
        self._apply_entity_to_model(model, template, include_creation_fields=True)
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateTemplateError(template.name) from exc
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, template: Template) -> Template:
        if template.id is None:
            raise ValueError("Template id is required for updates")
        model = self.session.get(TemplateModel, template.id)
        if model is None:
            msg = f"Template with id {template.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, template, include_creation_fields=False)
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateTemplateError(template.name) from exc
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, template_id: str) -> bool:
        model = self.session.get(TemplateModel, template_id)
        if model is None:
            return False
        self.session.delete(model)
        self.session.commit()
        return True

    @staticmethod
    def _apply_entity_to_model(
        model: TemplateModel,
        template: Template,
        *,
        include_creation_fields: bool,
    ) -> None:
        now = now_utc()
        if include_creation_fields:
            model.id = template.id or uuid4().hex
            model.created_at = ensure_utc(template.created_at) or now
        model.name = template.name
        model.display_name = template.display_name
        model.description = template.description
        model.category = template.category
        model.tags = list(template.tags)
        model.versions = [_dump_version(version) for version in template.versions]
        model.updated_at = now

    @staticmethod
    def _to_entity(model: TemplateModel) -> Template:
        return Template(
            id=model.id,
            name=model.name,
            versions=[_load_version(item) for item in model.versions or []],
            display_name=model.display_name,
            description=model.description,
            category=model.category,
            tags=list(model.tags or []),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )


def _dump_version(version: TemplateVersion) -> dict[str, Any]:
    return {
        "version_id": version.version_id,
        "channel": version.channel,
        "subject": version.subject,
        "content": version.content,
        "html": version.html,
        "parameters": list(version.parameters),
        "active": version.active,
        "created_at": to_isoformat(version.created_at),
    }


def _load_version(payload: dict[str, Any]) -> TemplateVersion:
    return TemplateVersion(
        version_id=payload["version_id"],
        channel=payload["channel"],
        content=payload.get("content") or "",
        subject=payload.get("subject"),
        html=payload.get("html"),
        parameters=list(payload.get("parameters") or []),
        active=bool(payload.get("active", True)),
        created_at=parse_isoformat(payload.get("created_at")),
    )


__all__ = ["DuplicateTemplateError", "TemplateRepository"]
