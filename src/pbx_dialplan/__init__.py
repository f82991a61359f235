"""pbx-dialplan — dial plan resolution for a small PBX.

Turns a dialed or incoming number into an internal extension, or an
external number plus the trunk to place it on.
"""

__version__ = "0.1.0"

from pbx_dialplan.digits import sanitize
from pbx_dialplan.normalizer import NumberClass, classify, normalize, LOCAL_AREA_CODE
from pbx_dialplan.tables import RoutingTables
from pbx_dialplan.outcome import (
    Internal,
    External,
    RouteTarget,
    FailureReason,
    RouteOutcome,
    build_outcome,
)
from pbx_dialplan.calltypes import Direction, parse_call_type, parse_caller
from pbx_dialplan.resolver import RouteResolver, TrunkPolicy
from pbx_dialplan.config import DialPlanConfig
from pbx_dialplan.exceptions import (
    DialPlanError,
    RoutingTableError,
    DialPlanConfigError,
    UnknownDirectionError,
    AgiProtocolError,
)

__all__ = [
    "sanitize",
    "NumberClass",
    "classify",
    "normalize",
    "LOCAL_AREA_CODE",
    "RoutingTables",
    "Internal",
    "External",
    "RouteTarget",
    "FailureReason",
    "RouteOutcome",
    "build_outcome",
    "Direction",
    "parse_call_type",
    "parse_caller",
    "RouteResolver",
    "TrunkPolicy",
    "DialPlanConfig",
    "DialPlanError",
    "RoutingTableError",
    "DialPlanConfigError",
    "UnknownDirectionError",
    "AgiProtocolError",
]
