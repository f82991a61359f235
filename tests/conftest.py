"""Shared test fixtures."""

import pytest

from pbx_dialplan.resolver import RouteResolver, TrunkPolicy
from pbx_dialplan.tables import RoutingTables


@pytest.fixture
def tables():
    return RoutingTables.default()


@pytest.fixture
def resolver(tables):
    return RouteResolver(tables)


@pytest.fixture
def strict_resolver(tables):
    """Resolver that denies external calls when the caller has no trunk."""
    return RouteResolver(tables, trunk_policy=TrunkPolicy.REQUIRED)


@pytest.fixture
def tables_yaml(tmp_path):
    """A small alternate routing table on disk."""
    path = tmp_path / "tables.yaml"
    path.write_text("""
numbers:
  "71112223344": 201
  "73843555000": 201
  "71112223355": 202
short_codes:
  "100": 201
trunks:
  201: "71112223344"
""")
    return str(path)
