"""Number normalizer — one canonical form per destination.

Dispatch is purely on the length (and, for 11 digits, the leading digit)
of an already sanitized digit string:

    3 digits               short internal code, passed through
    6 digits               local number, prefixed with the local area code
    10 digits              national number without trunk prefix, prefixed with 7
    11 digits, leading 7   canonical national number, passed through
    11 digits, leading 8   domestic long-distance form, leading 8 becomes 7

Anything else has no canonical form.
"""

import enum
from typing import Optional

LOCAL_AREA_CODE = "73843"
TRUNK_PREFIX = "7"
LONG_DISTANCE_PREFIX = "8"


class NumberClass(enum.Enum):
    """Shape of a dialed digit string."""
    SHORT = "short"
    LOCAL = "local"
    NATIONAL_10 = "national_10"
    NATIONAL_7 = "national_7"
    NATIONAL_8 = "national_8"


def classify(digits: str) -> Optional[NumberClass]:
    """Return the NumberClass of a digit string, or None if it has none."""
    length = len(digits)
    if length == 3:
        return NumberClass.SHORT
    if length == 6:
        return NumberClass.LOCAL
    if length == 10:
        return NumberClass.NATIONAL_10
    if length == 11:
        if digits[0] == TRUNK_PREFIX:
            return NumberClass.NATIONAL_7
        if digits[0] == LONG_DISTANCE_PREFIX:
            return NumberClass.NATIONAL_8
    return None


def normalize(digits: str, area_code: str = LOCAL_AREA_CODE) -> Optional[str]:
    """Convert sanitized digits to the canonical number used as a lookup key.

    Short codes are returned as-is and never widened to a full number.

    Args:
        digits: Output of sanitize().
        area_code: Prefix turning a 6-digit local number into 11 digits.

    Returns:
        The canonical number, or None if the input has no valid shape.
    """
    number_class = classify(digits)
    if number_class is None:
        return None
    if number_class is NumberClass.LOCAL:
        return area_code + digits
    if number_class is NumberClass.NATIONAL_10:
        return TRUNK_PREFIX + digits
    if number_class is NumberClass.NATIONAL_8:
        return TRUNK_PREFIX + digits[1:]
    # SHORT and NATIONAL_7 are already canonical
    return digits
