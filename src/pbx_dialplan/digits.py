"""Digit sanitizer — reduces free-form dialed input to ASCII digits."""

from typing import Optional

MAX_DIGITS = 11  # longest canonical number (7 + 10 digits)

_ASCII_DIGITS = frozenset("0123456789")


def sanitize(raw: str) -> Optional[str]:
    """Strip every character that is not an ASCII digit.

    Length is not checked here; the normalizer decides what lengths are valid.

    Examples:
        "+7 (923) 525-40-61" → "79235254061"
        "104" → "104"
        "ext." → None

    Returns:
        The digit string, or None if nothing is left.
    """
    digits = "".join(c for c in raw if c in _ASCII_DIGITS)
    return digits or None
