"""Helper utilities for résumé text handling."""

import re
import unicodedata

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def normalize_unicode(text: str) -> str:
    """Normalize unicode (NFC) and replace non-breaking spaces."""
    if not text:
        return ""
    return unicodedata.normalize("NFC", text).replace("\u00a0", " ")


def strip_control_chars(text: str) -> str:
    """Replace non-printable control characters (keeps tab/newline) with spaces."""
    if not text:
        return ""
    return _CONTROL_CHARS.sub(" ", text)


def collapse_whitespace(text: str, keep_newlines: bool = True) -> str:
    """Collapse runs of spaces; optionally keep paragraph breaks (max one blank line)."""
    if not text:
        return ""
    if not keep_newlines:
        return re.sub(r"\s+", " ", text).strip()
    t = re.sub(r"[ \t\r\f\v]+", " ", text)
    t = re.sub(r" *\n *", "\n", t)
    t = re.sub(r"\n{3,}", "\n\n", t)
    return t.strip()


def count_letters(text: str) -> int:
    """Number of alphabetic characters (any script)."""
    return sum(1 for ch in text or "" if ch.isalpha())


def truncate(text: str, max_chars: int) -> str:
    """Cut text to max_chars, marking the cut."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "\n\n[Content truncated.]"
