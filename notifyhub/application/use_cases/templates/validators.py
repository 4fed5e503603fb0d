"""Validation helpers for template payloads."""

from __future__ import annotations

import re
from collections.abc import Iterable

from notifyhub.domain.entities import CHANNELS, TEMPLATE_CATEGORIES
from notifyhub.domain.exceptions import ValidationError

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][\w.-]*)\s*\}\}")
MAX_NAME_LENGTH = 100


def normalize_template_name(name: str) -> str:
    normalized = (name or "").strip()
    if not normalized:
        raise ValidationError("Template name cannot be empty")
    if len(normalized) > MAX_NAME_LENGTH:
        raise ValidationError(f"Template name cannot exceed {MAX_NAME_LENGTH} characters")
    return normalized


def ensure_channel(channel: str) -> str:
    if channel not in CHANNELS:
        raise ValidationError(f"Invalid channel: {channel}")
    return channel


def ensure_category(category: str) -> str:
    if category not in TEMPLATE_CATEGORIES:
        raise ValidationError(f"Invalid template category: {category}")
    return category


def extract_placeholders(*texts: str | None) -> list[str]:
    """Return the distinct placeholder names in ``texts`` in order of appearance."""

    names: list[str] = []
    for text in texts:
        for match in PLACEHOLDER_PATTERN.finditer(text or ""):
            if match.group(1) not in names:
                names.append(match.group(1))
    return names


def normalize_parameters(parameters: Iterable[str]) -> list[str]:
    """Strip and de-duplicate parameter names keeping their declared order."""

    normalized: list[str] = []
    for parameter in parameters:
        name = str(parameter).strip()
        if not name:
            raise ValidationError("Template parameter names cannot be empty")
        if name not in normalized:
            normalized.append(name)
    return normalized


__all__ = [
    "PLACEHOLDER_PATTERN",
    "ensure_category",
    "ensure_channel",
    "extract_placeholders",
    "normalize_parameters",
    "normalize_template_name",
]
