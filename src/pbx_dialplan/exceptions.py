"""Exception hierarchy for pbx-dialplan.

Routing failures are not exceptions: they travel as FailureReason values
inside a RouteOutcome. These classes cover configuration and protocol errors.
"""


class DialPlanError(Exception):
    """Base exception for all dial plan errors."""
    pass


class RoutingTableError(DialPlanError):
    """Error loading or validating the routing tables."""
    pass


class DialPlanConfigError(DialPlanError):
    """Error loading or parsing the dial plan configuration."""
    pass


class UnknownDirectionError(DialPlanError):
    """The call direction / call type is not one we know how to route."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Unknown call direction: {value!r}")


class AgiProtocolError(DialPlanError):
    """Asterisk sent something unexpected, or hung up mid-conversation."""
    pass
