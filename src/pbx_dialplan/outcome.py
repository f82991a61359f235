"""Route targets, failure reasons and the outcome builder."""

import enum
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Internal:
    """Ring an internal station."""
    extension: int


@dataclass(frozen=True)
class External:
    """Dial a canonical number on the public network."""
    number: str


RouteTarget = Union[Internal, External]


class FailureReason(enum.Enum):
    INVALID_FORMAT = "invalid_format"
    UNKNOWN_INBOUND_DESTINATION = "unknown_inbound_destination"
    SHORT_CODE_NOT_MAPPED = "short_code_not_mapped"
    NO_TRUNK_AVAILABLE = "no_trunk_available"
    UNKNOWN_DIRECTION = "unknown_direction"


@dataclass(frozen=True)
class RouteOutcome:
    """The routing decision handed to the protocol layer.

    Always created through build_outcome() so the flags agree with the target.
    """
    success: bool
    internal: bool
    target: Optional[RouteTarget] = None
    trunk: Optional[str] = None
    failure: Optional[FailureReason] = None


def build_outcome(
    target: Optional[RouteTarget],
    trunk: Optional[str] = None,
    failure: Optional[FailureReason] = None,
) -> RouteOutcome:
    """Assemble a RouteOutcome with flags consistent with the target.

    - Internal target: success, internal, no trunk.
    - External target: success, not internal, trunk as given.
    - No target: failure; trunk is discarded.

    Raises:
        ValueError: If both or neither of target and failure are given.
    """
    if target is not None and failure is not None:
        raise ValueError(f"Outcome cannot have both a target ({target}) and a failure ({failure})")

    if isinstance(target, Internal):
        return RouteOutcome(success=True, internal=True, target=target)
    if isinstance(target, External):
        return RouteOutcome(success=True, internal=False, target=target, trunk=trunk)
    if target is not None:
        raise ValueError(f"Not a route target: {target!r}")
    if failure is None:
        raise ValueError("Outcome needs either a target or a failure reason")
    return RouteOutcome(success=False, internal=False, failure=failure)


def failed(reason: FailureReason) -> RouteOutcome:
    """Shorthand for a failure outcome."""
    return build_outcome(None, failure=reason)
