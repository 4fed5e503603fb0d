"""Normalization of recipient addresses."""

from __future__ import annotations

import re

DEFAULT_COUNTRY_CODE = "55"

_NON_DIGITS = re.compile(r"\D")


def format_phone_number(phone_number: str, *, country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """Return ``phone_number`` in E.164 form.

    Punctuation is stripped. Numbers written without a leading ``+`` get
    ``country_code`` prepended unless their digits already start with it.
    Malformed input is never rejected, it simply comes back stripped, which
    keeps the function idempotent.
    """

    raw = (phone_number or "").strip()
    digits = _NON_DIGITS.sub("", raw)
    if not raw.startswith("+") and not digits.startswith(country_code):
        digits = country_code + digits
    return "+" + digits


def format_email(email: str) -> str:
    """Return ``email`` trimmed and lower-cased."""

    return (email or "").strip().lower()


__all__ = ["DEFAULT_COUNTRY_CODE", "format_email", "format_phone_number"]
