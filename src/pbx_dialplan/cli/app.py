"""CLI entry point for pbx-dialplan.

Usage:
    pbx-dialplan agi 104 outbound 501                  # Run as an Asterisk AGI script
    pbx-dialplan resolve 89235254706 --caller 501      # Resolve one number and print it
    pbx-dialplan resolve 79235254061 -d inbound
    pbx-dialplan serve --port 8080                     # HTTP resolve endpoint
    pbx-dialplan --config path/to/config.yaml ...      # Custom config path
"""

import logging
import sys

import click
import uvicorn
from fastapi import FastAPI

from pbx_dialplan import __version__
from pbx_dialplan.agi import AgiChannel, outcome_variables, run_agi
from pbx_dialplan.config import DEFAULT_CONFIG_PATH, DialPlanConfig
from pbx_dialplan.exceptions import AgiProtocolError, DialPlanError
from pbx_dialplan.webhook import DialPlanWebhookHandler

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _load_config(path: str) -> DialPlanConfig:
    try:
        return DialPlanConfig.from_yaml(path)
    except DialPlanError as e:
        raise click.ClickException(str(e)) from e


def _build_resolver(config: DialPlanConfig):
    try:
        return config.build_resolver()
    except DialPlanError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Path to dial plan config YAML")
@click.option("--log-level", default=None, type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
              help="Overrides log_level from the config file")
@click.version_option(__version__, prog_name="pbx-dialplan")
@click.pass_context
def main(ctx: click.Context, config: str, log_level: str | None):
    """Resolve dialed numbers to PBX routing decisions."""
    cfg = _load_config(config)
    level = log_level or cfg.log_level
    # stdout belongs to the AGI protocol, so logs always go to stderr
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT, stream=sys.stderr)
    ctx.obj = cfg


@main.command()
@click.argument("call_args", nargs=-1)
@click.pass_obj
def agi(config: DialPlanConfig, call_args: tuple[str, ...]):
    """Resolve one call for Asterisk over the AGI protocol, then exit.

    CALL_ARGS are the dialed number, call type and caller extension, as
    passed by AGI(pbx-dialplan,agi,...). Without them the agi_arg_N
    environment values are used.
    """
    resolver = _build_resolver(config)
    try:
        run_agi(AgiChannel(), resolver, call_args)
    except AgiProtocolError as e:
        logger.error("AGI session aborted: %s", e)
        sys.exit(1)


@main.command()
@click.argument("dialed")
@click.option("--direction", "-d", default="outbound", help="inbound, outbound or a legacy call type")
@click.option("--caller", default="", help="Calling extension")
@click.pass_obj
def resolve(config: DialPlanConfig, dialed: str, direction: str, caller: str):
    """Resolve DIALED and print the resulting dialplan variables."""
    resolver = _build_resolver(config)
    outcome = resolver.resolve_call(dialed, caller, direction)
    for name, value in outcome_variables(outcome).items():
        click.echo(f"{name}={value}")
    if not outcome.success:
        sys.exit(2)


@main.command()
@click.option("--host", default=None, help="Host to bind to (default from config)")
@click.option("--port", "-p", default=None, type=int, help="Port to bind to (default from config)")
@click.pass_obj
def serve(config: DialPlanConfig, host: str | None, port: int | None):
    """Serve the HTTP resolve endpoint."""
    resolver = _build_resolver(config)
    host = host or config.server_host
    port = port or config.server_port

    app = FastAPI(title="PBX Dial Plan", version=__version__)
    DialPlanWebhookHandler(resolver).register(app)

    logger.info(
        "Starting dial plan server on %s:%d (%d numbers, trunk policy %s)",
        host, port, len(resolver.tables.number_to_extension), resolver.trunk_policy.value,
    )
    uvicorn.run(app, host=host, port=port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
