"""Boundary parsing of the call direction and caller identifier.

The dialplan passes a call type string. "inbound" and "outbound" are the
canonical values. Older dialplans pass a call type that already names the
shape of the dialed number; those are routed as outbound calls, and the
dialed digits must actually have that shape.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from pbx_dialplan.exceptions import UnknownDirectionError
from pbx_dialplan.normalizer import NumberClass


class Direction(enum.Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


@dataclass(frozen=True)
class CallRequest:
    """A parsed call type: direction plus the number shapes it accepts.

    An empty expected_classes means any shape the normalizer accepts.
    """
    direction: Direction
    expected_classes: frozenset = frozenset()

    def accepts(self, number_class: Optional[NumberClass]) -> bool:
        if number_class is None:
            return False
        return not self.expected_classes or number_class in self.expected_classes


LEGACY_CALL_TYPES: dict[str, frozenset] = {
    "old_short": frozenset({NumberClass.SHORT}),
    "city_6": frozenset({NumberClass.LOCAL}),
    "federal_plus": frozenset({NumberClass.NATIONAL_10, NumberClass.NATIONAL_7, NumberClass.NATIONAL_8}),
    "federal_7": frozenset({NumberClass.NATIONAL_7}),
    "federal_8": frozenset({NumberClass.NATIONAL_8}),
}


def parse_call_type(value: str) -> CallRequest:
    """Parse the call type argument passed by the dialplan.

    Raises:
        UnknownDirectionError: If the value is not a known call type.
    """
    key = (value or "").strip().lower()
    if key == Direction.INBOUND.value:
        return CallRequest(Direction.INBOUND)
    if key == Direction.OUTBOUND.value:
        return CallRequest(Direction.OUTBOUND)
    if key in LEGACY_CALL_TYPES:
        return CallRequest(Direction.OUTBOUND, LEGACY_CALL_TYPES[key])
    raise UnknownDirectionError(value)


def parse_caller(raw: Optional[str]) -> Optional[int]:
    """Turn the caller identifier into an extension number, if it is one.

    "501" → 501; "", "anonymous", "0", "+7923..." with formatting → None.
    """
    text = (raw or "").strip()
    if not text.isascii() or not text.isdigit():
        return None
    ext = int(text)
    return ext if ext > 0 else None
