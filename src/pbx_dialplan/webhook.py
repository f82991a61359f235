"""FastAPI webhook handler for HTTP dial plan lookups.

Registers two routes:
  POST /dialplan/resolve  — resolve one call, returns the dialplan variables as JSON
  GET  /health            — liveness plus routing table sizes

Useful for switches that fetch routing decisions over HTTP instead of
running an AGI script per call.
"""

import logging

from fastapi import FastAPI, Request

from pbx_dialplan.agi import outcome_variables
from pbx_dialplan.resolver import RouteResolver

logger = logging.getLogger(__name__)


class DialPlanWebhookHandler:
    """Registers FastAPI routes backed by a RouteResolver.

    Usage:
        app = FastAPI()
        handler = DialPlanWebhookHandler(RouteResolver(RoutingTables.default()))
        handler.register(app)
    """

    def __init__(self, resolver: RouteResolver):
        self.resolver = resolver

    def register(self, app: FastAPI) -> None:
        """Register the dial plan routes on a FastAPI application."""

        @app.post("/dialplan/resolve")
        async def resolve(request: Request):
            """Resolve a call. A denied call is still a 200 with ROUTE_STATUS=FAILED."""
            form = await request.form()
            dialed = str(form.get("dialed", ""))
            direction = str(form.get("direction", ""))
            caller = str(form.get("caller", ""))

            logger.info("HTTP resolve: %s %r from %r", direction, dialed, caller)
            outcome = self.resolver.resolve_call(dialed, caller, direction)
            return outcome_variables(outcome)

        @app.get("/health")
        async def health():
            tables = self.resolver.tables
            return {
                "status": "ok",
                "numbers": len(tables.number_to_extension),
                "trunks": len(tables.extension_to_trunk),
                "trunk_policy": self.resolver.trunk_policy.value,
            }
