"""Text normalization utilities for city name matching."""
import re
import unicodedata
from typing import Optional, Tuple


# Whole-word abbreviation expansions, applied at the start or after a space
ABBREVIATIONS = {
    "st": "saint",
    "ft": "fort",
    "mt": "mount",
}

_NON_ALNUM = re.compile(r"[\W_]+")
_REGION_SUFFIX = re.compile(r"^(.*?)[ ,]+([a-z]{2})$", re.IGNORECASE)
_ABBREVIATION_PATTERNS = [
    (re.compile(r"(^|\s)" + re.escape(abbrev) + r"\b"), r"\g<1>" + expansion)
    for abbrev, expansion in ABBREVIATIONS.items()
]


def normalize_text(text: str) -> str:
    """
    Normalize text for matching: decompose accents, replace runs of
    non-letter/non-digit characters with a space, trim, lowercase.

    Args:
        text: Input text string

    Returns:
        Normalized text string
    """
    if not text:
        return ""

    # Unicode normalization
    text = unicodedata.normalize("NFKD", text)
    text = "".join(c for c in text if not unicodedata.combining(c))

    # Collapse punctuation and whitespace
    text = _NON_ALNUM.sub(" ", text)

    return text.strip().lower()


def label_key(name: str, state: str) -> str:
    """Normalized "name, state" lookup key."""
    return normalize_text(f"{name}, {state}")


def split_region_code(normalized: str) -> Tuple[str, Optional[str]]:
    """
    Split a trailing two-letter region code off a normalized string.

    Args:
        normalized: Output of normalize_text

    Returns:
        Tuple (name_part, region_code or None); region code is upper case
    """
    match = _REGION_SUFFIX.match(normalized)
    if not match:
        return normalized, None
    return match.group(1).strip(), match.group(2).upper()


def expand_abbreviations(name: str) -> str:
    """Expand "st", "ft" and "mt" tokens to "saint", "fort" and "mount"."""
    for pattern, replacement in _ABBREVIATION_PATTERNS:
        name = pattern.sub(replacement, name)
    return name
