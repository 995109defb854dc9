"""Input normalization for submitted voter, venue and category names."""

import re
import unicodedata

# Control characters to remove (except newline, tab)
CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

MULTI_WHITESPACE_PATTERN = re.compile(r"\s+")

MAX_NAME_LENGTH = 255


def normalize_text(text: str | None) -> str | None:
    """
    Normalize text input by:
    - Normalizing Unicode to NFC form
    - Removing null bytes and control characters
    - Stripping leading/trailing whitespace
    - Collapsing runs of whitespace to a single space

    Returns None if input is None.
    """
    if text is None:
        return None

    text = unicodedata.normalize("NFC", text)
    text = CONTROL_CHAR_PATTERN.sub("", text)
    text = text.strip()
    return MULTI_WHITESPACE_PATTERN.sub(" ", text)


def normalize_single_line(text: str | None) -> str | None:
    """Normalize text for single-line fields (no newlines allowed)."""
    if text is None:
        return None

    text = text.replace("\n", " ").replace("\r", " ")

    return normalize_text(text)


def validate_length(text: str | None, min_len: int = 0, max_len: int = MAX_NAME_LENGTH) -> bool:
    """Validate that text length is within bounds."""
    if text is None:
        return min_len == 0
    return min_len <= len(text) <= max_len
