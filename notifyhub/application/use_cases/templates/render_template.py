"""Rendering of stored templates into concrete message content."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from notifyhub.domain.entities import CHANNEL_EMAIL, Template
from notifyhub.domain.exceptions import NotFoundError, ValidationError
from notifyhub.infrastructure.repositories import TemplateRepository

from .validators import ensure_channel


@dataclass
class RenderedContent:
    """Output of :func:`render_template`. Only email fills subject and html."""

    text: str
    subject: str | None = None
    html: str | None = None


def _find_template(repository: TemplateRepository, template_ref: str) -> Template:
    template = repository.get(template_ref) or repository.get_by_name(template_ref.strip())
    if template is None:
        raise NotFoundError(f"Template not found: {template_ref}")
    return template


def substitute(text: str | None, names: list[str], parameters: Mapping[str, Any]) -> str | None:
    """Replace every ``{{ name }}`` placeholder for the declared ``names``.

    Placeholders for undeclared names are left untouched.
    """

    if text is None or not names:
        return text
    pattern = re.compile(
        r"\{\{\s*(" + "|".join(re.escape(name) for name in names) + r")\s*\}\}"
    )
    return pattern.sub(lambda match: str(parameters[match.group(1)]), text)


def render_template(
    session: Session,
    template_ref: str,
    channel: str,
    parameters: Mapping[str, Any] | None = None,
) -> RenderedContent:
    """Render the active ``channel`` version of a template.

    ``template_ref`` may be a template id or a template name.

    Raises:
        NotFoundError: If the template or an active version for ``channel``
            does not exist.
        ValidationError: Listing every declared parameter missing from
            ``parameters``.
    """

    ensure_channel(channel)
    parameters = dict(parameters or {})
    template = _find_template(TemplateRepository(session), template_ref)

    version = template.active_version(channel)
    if version is None:
        raise NotFoundError(
            f"No active version found for channel {channel} in template {template.name}"
        )

    missing = [name for name in version.parameters if name not in parameters]
    if missing:
        raise ValidationError(f"Missing required parameters: {', '.join(missing)}")

    text = substitute(version.content, version.parameters, parameters)
    if channel != CHANNEL_EMAIL:
        return RenderedContent(text=text)

    html_source = version.html if version.html else version.content
    return RenderedContent(
        text=text,
        subject=substitute(version.subject, version.parameters, parameters),
        html=substitute(html_source, version.parameters, parameters),
    )
