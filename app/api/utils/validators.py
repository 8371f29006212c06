import re
from typing import Any

# local-part "@" domain-part, at least one "." in the domain, no whitespace anywhere
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def is_valid_email(value: Any) -> bool:
    """Return True if ``value`` is a non-empty string shaped like an email.

    The whole string must match; surrounding whitespace is not stripped, so
    ``" user@example.com"`` is rejected.

    Args:
        value: The submitted value, of any JSON type.

    Returns:
        True only for a non-empty ``str`` matching :data:`EMAIL_PATTERN`.
    """
    if not isinstance(value, str) or not value:
        return False
    return EMAIL_PATTERN.fullmatch(value) is not None


def normalize_email(email: str) -> str:
    """Lowercase the whole address. No trimming is performed."""
    return email.lower()
