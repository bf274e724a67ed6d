"""Phone number utilities for consistent handling across the application."""

import logging
import re

logger = logging.getLogger(__name__)

_FORMATTING_CHARS = re.compile(r"[\s\-().]")


def normalize_phone(phone: str | None) -> str | None:
    """Strip formatting from a phone number.

    Spaces, dashes, dots and parentheses are removed; a leading '+' and
    the digits are kept. No country code is assumed, so numbers are
    compared exactly as the user entered them minus formatting:
        (281) 788-2316   → 2817882316
        +1 281 788 2316  → +12817882316
        +1000            → +1000

    Returns:
        Normalized phone, or None when nothing is left
    """
    if phone is None:
        return None

    cleaned = _FORMATTING_CHARS.sub("", str(phone))
    if not cleaned:
        return None

    if not re.fullmatch(r"\+?\d+", cleaned):
        logger.warning(f"Phone number contains unexpected characters: {cleaned!r}")
    return cleaned
