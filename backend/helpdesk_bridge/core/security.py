from __future__ import annotations

import re

BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9+/=_.\-]+")
JWT_PATTERN = re.compile(r"eyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]*")
EMAIL_PATTERN = re.compile(r"\A[\w+\-.]+@[a-z\d\-]+(\.[a-z\d\-]+)*\.[a-z]+\Z", re.IGNORECASE)


def redact_secrets(text: str) -> str:
    """Redact bearer credentials and signed tokens from a string."""

    text = BEARER_PATTERN.sub(r"\1***", text)
    return JWT_PATTERN.sub("***", text)


def sanitize_text(text: str, max_length: int) -> str:
    """Trim and clamp user-provided text to a safe length."""

    cleaned = text.strip()
    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]
    return cleaned


def is_valid_email(email: str) -> bool:
    """Return True when the string has a conservative email shape."""

    return bool(EMAIL_PATTERN.match(email))
