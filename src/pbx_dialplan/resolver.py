"""Route resolver — turns a call attempt into a RouteOutcome.

Usage:
    resolver = RouteResolver(RoutingTables.default())
    outcome = resolver.resolve_call("8 923 525-47-06", "501", "outbound")
    # RouteOutcome(success=True, internal=True, target=Internal(extension=508), ...)

Nothing here does I/O or raises for a bad call: every failure comes back
as a RouteOutcome with a FailureReason.
"""

import enum
import logging
from typing import Optional

from pbx_dialplan.calltypes import CallRequest, Direction, parse_call_type, parse_caller
from pbx_dialplan.digits import MAX_DIGITS, sanitize
from pbx_dialplan.exceptions import UnknownDirectionError
from pbx_dialplan.normalizer import LOCAL_AREA_CODE, classify, normalize
from pbx_dialplan.outcome import (
    External,
    FailureReason,
    Internal,
    RouteOutcome,
    build_outcome,
    failed,
)
from pbx_dialplan.tables import RoutingTables

logger = logging.getLogger(__name__)


class TrunkPolicy(enum.Enum):
    """What to do with an external call when the caller has no trunk."""
    OPTIONAL = "optional"   # place the call without a trunk hint
    REQUIRED = "required"   # deny with NO_TRUNK_AVAILABLE


class RouteResolver:
    """Resolves dialed numbers against a fixed set of routing tables."""

    def __init__(
        self,
        tables: RoutingTables,
        trunk_policy: TrunkPolicy = TrunkPolicy.OPTIONAL,
        area_code: str = LOCAL_AREA_CODE,
    ):
        self.tables = tables
        self.trunk_policy = trunk_policy
        self.area_code = area_code

    def resolve(
        self,
        direction: Direction,
        number: str,
        caller_ext: Optional[int] = None,
    ) -> RouteOutcome:
        """Decide where a call goes.

        Args:
            direction: INBOUND or OUTBOUND.
            number: For inbound calls, the sanitized DID as delivered by the
                carrier. For outbound calls, the output of normalize().
            caller_ext: Calling extension, used to pick the outbound trunk.

        Returns:
            The RouteOutcome. Inbound calls only match full 11-digit numbers
            and never route externally; an unmapped short code is never
            dialed out.
        """
        if direction is Direction.INBOUND:
            # carriers deliver full numbers; short codes are for internal callers only
            ext = self.tables.lookup_extension(number) if len(number) == MAX_DIGITS else None
            if ext is None:
                return failed(FailureReason.UNKNOWN_INBOUND_DESTINATION)
            return build_outcome(Internal(ext))

        ext = self.tables.lookup_extension(number)
        if ext is not None:
            return build_outcome(Internal(ext))

        if len(number) == 3:
            return failed(FailureReason.SHORT_CODE_NOT_MAPPED)

        trunk = self.tables.lookup_trunk(caller_ext)
        if trunk is None:
            if self.trunk_policy is TrunkPolicy.REQUIRED:
                return failed(FailureReason.NO_TRUNK_AVAILABLE)
            logger.debug("No trunk for caller %s, dialing %s without one", caller_ext, number)
        return build_outcome(External(number), trunk=trunk)

    def resolve_call(self, dialed_raw: str, caller_raw: Optional[str], call_type: str) -> RouteOutcome:
        """Resolve a call from the raw strings the dialplan hands us.

        Args:
            dialed_raw: Dialed or called number, any formatting.
            caller_raw: Caller extension; anything non-numeric means unknown.
            call_type: "inbound", "outbound" or a legacy call type.
        """
        try:
            request = parse_call_type(call_type)
        except UnknownDirectionError as e:
            logger.warning("%s (dialed=%r)", e, dialed_raw)
            return failed(FailureReason.UNKNOWN_DIRECTION)

        caller_ext = parse_caller(caller_raw)
        outcome = self._resolve_request(request, dialed_raw, caller_ext)
        logger.info(
            "Route %s %r from %s: %s",
            request.direction.value,
            dialed_raw,
            caller_ext if caller_ext is not None else "unknown",
            describe(outcome),
        )
        return outcome

    def _resolve_request(self, request: CallRequest, dialed_raw: str, caller_ext: Optional[int]) -> RouteOutcome:
        direction = request.direction
        digits = sanitize(dialed_raw or "")
        if digits is None:
            return failed(FailureReason.INVALID_FORMAT)

        if direction is Direction.INBOUND:
            if len(digits) > MAX_DIGITS:
                return failed(FailureReason.INVALID_FORMAT)
            return self.resolve(direction, digits, caller_ext)

        if not request.accepts(classify(digits)):
            return failed(FailureReason.INVALID_FORMAT)
        normalized = normalize(digits, self.area_code)
        if normalized is None:
            return failed(FailureReason.INVALID_FORMAT)
        return self.resolve(direction, normalized, caller_ext)


def describe(outcome: RouteOutcome) -> str:
    """One-line human readable summary, for logs and VERBOSE output."""
    if not outcome.success:
        return f"FAILED ({outcome.failure.value})"
    if isinstance(outcome.target, Internal):
        return f"internal ext {outcome.target.extension}"
    trunk = outcome.trunk or "no trunk"
    return f"external {outcome.target.number} via {trunk}"
