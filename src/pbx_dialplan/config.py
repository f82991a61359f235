"""Configuration loader for pbx-dialplan."""

import os
import re
from dataclasses import dataclass
from pathlib import Path

import yaml

from pbx_dialplan.exceptions import DialPlanConfigError
from pbx_dialplan.normalizer import LOCAL_AREA_CODE
from pbx_dialplan.resolver import RouteResolver, TrunkPolicy
from pbx_dialplan.tables import RoutingTables

DEFAULT_CONFIG_PATH = "~/.pbx_dialplan/config.yaml"


@dataclass
class DialPlanConfig:
    """Top-level configuration for the dial plan resolver."""
    tables_path: str = ""                    # empty = compiled-in tables
    require_trunk: bool = False              # deny external calls with no trunk
    local_area_code: str = LOCAL_AREA_CODE   # prefix for 6-digit local numbers
    server_host: str = "127.0.0.1"
    server_port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, path: str = DEFAULT_CONFIG_PATH) -> "DialPlanConfig":
        """Load config from YAML file, with environment variable expansion.

        Environment variables in the format ${VAR_NAME} are expanded.
        A missing file gives the defaults.

        Raises:
            DialPlanConfigError: If the file is not valid YAML or a value is invalid.
        """
        config_path = Path(path).expanduser()
        if not config_path.exists():
            return cls()

        try:
            with open(config_path) as f:
                raw = f.read()
        except OSError as e:
            raise DialPlanConfigError(f"Failed to read config {config_path}: {e}") from e

        # Expand ${ENV_VAR} references
        def expand_env(match):
            var_name = match.group(1)
            return os.environ.get(var_name, match.group(0))

        raw = re.sub(r'\$\{(\w+)\}', expand_env, raw)
        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as e:
            raise DialPlanConfigError(f"Failed to parse config {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise DialPlanConfigError(f"Config {config_path} must be a mapping")

        config = cls(
            tables_path=str(data.get("tables_path", "") or ""),
            require_trunk=_as_bool(data.get("require_trunk", False)),
            local_area_code=str(data.get("local_area_code", LOCAL_AREA_CODE)),
            server_host=data.get("server_host", "127.0.0.1"),
            server_port=data.get("server_port", 8000),
            log_level=str(data.get("log_level", "INFO")).upper(),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Check values that would otherwise break routing at call time."""
        code = self.local_area_code
        # 6-digit local numbers must come out as 11-digit canonical numbers
        if len(code) != 5 or not code.isascii() or not code.isdigit() or not code.startswith("7"):
            raise DialPlanConfigError(f"local_area_code must be 5 digits starting with 7: {code!r}")
        port = self.server_port
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise DialPlanConfigError(f"Invalid server_port: {self.server_port!r}")

    @property
    def trunk_policy(self) -> TrunkPolicy:
        return TrunkPolicy.REQUIRED if self.require_trunk else TrunkPolicy.OPTIONAL

    def load_tables(self) -> RoutingTables:
        """The routing tables this config points at (compiled-in by default)."""
        if self.tables_path:
            return RoutingTables.from_yaml(self.tables_path)
        return RoutingTables.default()

    def build_resolver(self) -> RouteResolver:
        return RouteResolver(
            self.load_tables(),
            trunk_policy=self.trunk_policy,
            area_code=self.local_area_code,
        )


def _as_bool(value) -> bool:
    # ${ENV_VAR} expansion can leave a quoted "true"/"false" string
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
