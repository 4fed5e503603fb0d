"""Domain entities for reusable, parameterized message templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

TEMPLATE_CATEGORIES: tuple[str, ...] = ("transactional", "marketing", "alerts", "system")
DEFAULT_TEMPLATE_CATEGORY = "transactional"


@dataclass
class TemplateVersion:
    """Channel specific body of a template."""

    version_id: str
    channel: str
    content: str
    subject: str | None = None
    html: str | None = None
    parameters: list[str] = field(default_factory=list)
    active: bool = True
    created_at: datetime | None = None


@dataclass
class Template:
    id: str | None
    name: str
    versions: list[TemplateVersion] = field(default_factory=list)
    display_name: str | None = None
    description: str | None = None
    category: str = DEFAULT_TEMPLATE_CATEGORY
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def active_version(self, channel: str) -> TemplateVersion | None:
        """Return the first active version for ``channel`` in stored order."""

        for version in self.versions:
            if version.channel == channel and version.active:
                return version
        return None


__all__ = [
    "TEMPLATE_CATEGORIES",
    "DEFAULT_TEMPLATE_CATEGORY",
    "TemplateVersion",
    "Template",
]
