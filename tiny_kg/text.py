"""Name normalization and case-insensitive matching helpers."""

from .errors import EmptyInputError


def normalize_name(text: str) -> str:
    """Trim and collapse internal whitespace, preserving case.

    Args:
        text: Raw user or file input

    Returns:
        Normalized text (may be empty)
    """
    return " ".join(text.split())


def require_name(text: str, field: str = "name") -> str:
    """Normalize text and reject it if nothing is left.

    Raises:
        EmptyInputError: If the normalized text is empty.
    """
    normalized = normalize_name(text)
    if not normalized:
        raise EmptyInputError(field)
    return normalized


def equals_ignore_case(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def startswith_ignore_case(text: str, prefix: str) -> bool:
    return text.lower().startswith(prefix.lower())


def contains_ignore_case(text: str, needle: str) -> bool:
    return needle.lower() in text.lower()
