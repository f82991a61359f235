"""Asterisk Gateway Interface (AGI) glue.

Asterisk starts the script once per call, writes an environment block of
"agi_key: value" lines terminated by a blank line, then reads commands from
our stdout and answers each with "200 result=..." on our stdin.

Example dialplan:

    exten => _X.,1,AGI(pbx-dialplan,agi,${EXTEN},outbound,${CALLERID(num)})
       same => n,GotoIf($["${ROUTE_STATUS}" != "SUCCESS"]?denied)
       same => n,GotoIf($["${IS_INTERNAL_DEST}" = "TRUE"]?internal)
       same => n,Set(CALLERID(num)=${DIAL_TRUNK})
       same => n,Dial(PJSIP/${OUT_NUMBER}@provider)
       same => n(internal),Dial(PJSIP/${TARGET_EXT})
       same => n(denied),Congestion()

Asterisk runs "pbx-dialplan agi DIALED CALL_TYPE CALLER" and repeats the same
words as agi_arg_1.. in the environment, so "agi" comes first there.
"""

import logging
import re
import sys
from typing import Optional, Sequence, TextIO

from pbx_dialplan.exceptions import AgiProtocolError
from pbx_dialplan.outcome import External, Internal, RouteOutcome
from pbx_dialplan.resolver import RouteResolver, describe

logger = logging.getLogger(__name__)

ROUTE_STATUS = "ROUTE_STATUS"
IS_INTERNAL_DEST = "IS_INTERNAL_DEST"
TARGET_EXT = "TARGET_EXT"
OUT_NUMBER = "OUT_NUMBER"
DIAL_TRUNK = "DIAL_TRUNK"
ROUTE_FAILURE = "ROUTE_FAILURE"

# first script argument when Asterisk runs "pbx-dialplan agi ..."
AGI_SUBCOMMAND = "agi"

_RESPONSE_RE = re.compile(r"^(\d{3})[ -](.*)$")


class AgiChannel:
    """Line-oriented AGI session over a pair of text streams."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self.env: dict[str, str] = {}

    def read_env(self) -> dict[str, str]:
        """Consume the environment block Asterisk sends on startup."""
        while True:
            line = self._stdin.readline()
            if not line:
                raise AgiProtocolError("EOF while reading AGI environment")
            line = line.strip()
            if line == "":
                break
            if ":" not in line:
                logger.warning("Ignoring malformed AGI environment line: %r", line)
                continue
            key, value = line.split(":", 1)
            self.env[key.strip()] = value.strip()
        logger.debug("AGI environment: %s", self.env)
        return self.env

    @property
    def args(self) -> list[str]:
        """Script arguments (agi_arg_1, agi_arg_2, ...) in order."""
        args = []
        n = 1
        while f"agi_arg_{n}" in self.env:
            args.append(self.env[f"agi_arg_{n}"])
            n += 1
        return args

    def command(self, line: str) -> str:
        """Send one AGI command and return the result text after "200 ".

        Raises:
            AgiProtocolError: On hangup (EOF) or a non-200 response.
        """
        self._stdout.write(line + "\n")
        self._stdout.flush()

        response = self._stdin.readline()
        if not response:
            raise AgiProtocolError(f"EOF waiting for response to: {line}")
        response = response.strip()
        match = _RESPONSE_RE.match(response)
        if not match:
            raise AgiProtocolError(f"Malformed AGI response: {response!r}")
        code, rest = match.groups()
        if code != "200":
            raise AgiProtocolError(f"AGI command failed ({code} {rest}): {line}")
        return rest

    def set_variable(self, name: str, value: str) -> None:
        self.command(f'SET VARIABLE "{_quote(name)}" "{_quote(value)}"')

    def verbose(self, message: str, level: int = 1) -> None:
        self.command(f'VERBOSE "{_quote(message)}" {level}')


def _quote(value: str) -> str:
    return str(value).replace("\\", "\\\\").replace('"', '\\"')


def outcome_variables(outcome: RouteOutcome) -> dict[str, str]:
    """Dialplan variables describing a RouteOutcome.

    ROUTE_STATUS and IS_INTERNAL_DEST are always present; the rest only when
    they apply.
    """
    variables = {
        ROUTE_STATUS: "SUCCESS" if outcome.success else "FAILED",
        IS_INTERNAL_DEST: "TRUE" if outcome.internal else "FALSE",
    }
    if isinstance(outcome.target, Internal):
        variables[TARGET_EXT] = str(outcome.target.extension)
    elif isinstance(outcome.target, External):
        variables[OUT_NUMBER] = outcome.target.number
        if outcome.trunk:
            variables[DIAL_TRUNK] = outcome.trunk
    if outcome.failure is not None:
        variables[ROUTE_FAILURE] = outcome.failure.value
    return variables


def run_agi(
    channel: AgiChannel,
    resolver: RouteResolver,
    args: Optional[Sequence[str]] = None,
) -> RouteOutcome:
    """Handle one AGI invocation: read arguments, resolve, set variables.

    Args:
        channel: The AGI session.
        resolver: Resolver for the call.
        args: Script arguments from the command line. When empty, the
            agi_arg_N values are used, minus a leading "agi" subcommand.

    Raises:
        AgiProtocolError: If Asterisk goes away or rejects a command.
    """
    channel.read_env()
    if args:
        args = list(args)
    else:
        args = channel.args
        if args and args[0] == AGI_SUBCOMMAND:
            args = args[1:]
    dialed = args[0] if len(args) > 0 else ""
    call_type = args[1] if len(args) > 1 else ""
    caller = args[2] if len(args) > 2 else ""

    outcome = resolver.resolve_call(dialed, caller, call_type)

    for name, value in outcome_variables(outcome).items():
        channel.set_variable(name, value)
    channel.verbose(f"pbx-dialplan: {dialed} -> {describe(outcome)}", 3)
    return outcome
