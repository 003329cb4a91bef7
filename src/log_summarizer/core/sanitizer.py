"""Redaction of PII and secrets before log text leaves the process."""

from __future__ import annotations

import re

EMAIL_MARKER = "[EMAIL_REDACTED]"
TOKEN_MARKER = "[TOKEN_REDACTED]"
IP_MARKER = "[IP_REDACTED]"

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_BEARER_RE = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9\-._~+/]+=*")
# Dotted quads only; octet values are not range-checked.
_IPV4_RE = re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b")


def sanitize(text: str) -> str:
    """Mask emails, bearer tokens and IPv4 addresses.

    Rules run in a fixed order: emails, then bearer tokens, then IPv4. A
    bearer match in any casing becomes ``Bearer [TOKEN_REDACTED]``. Markers
    never match any of the rules, so sanitizing twice is a no-op.
    """
    if not text or text.isspace():
        return text

    text = _EMAIL_RE.sub(EMAIL_MARKER, text)
    text = _BEARER_RE.sub(f"Bearer {TOKEN_MARKER}", text)
    text = _IPV4_RE.sub(IP_MARKER, text)
    return text
