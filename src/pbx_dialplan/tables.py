"""Routing tables — number → extension and extension → trunk.

Both mappings are read-only for the lifetime of the process. The default
tables are compiled in; an alternate set can be loaded once at start-up
from a YAML file:

    numbers:
      "79235253998": 501
      "73843602313": 501
    short_codes:
      "104": 501
    trunks:
      501: "79235253998"
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import yaml

from pbx_dialplan.exceptions import RoutingTableError
from pbx_dialplan.normalizer import TRUNK_PREFIX

logger = logging.getLogger(__name__)

# DID / city number → extension. Several numbers may ring the same station.
DEFAULT_NUMBERS: dict[str, int] = {
    "79235253998": 501, "73843602313": 501,
    "79235254061": 502, "73843601773": 502, "73843731773": 502,
    "79235254150": 503,
    "79235254132": 504, "73843602414": 504,
    "79235254389": 505,
    "79235254439": 506, "73843601771": 506,
    "79235254667": 507, "73843600912": 507,
    "79235254706": 508, "73843600911": 508, "73843731458": 508,
    "79235255049": 509, "73843601331": 509, "73843731313": 509,
    "79235255136": 510, "73843601221": 510, "73843731500": 510,
}

# Old internal short codes still in use on handsets.
DEFAULT_SHORT_CODES: dict[str, int] = {
    "104": 501,
    "135": 502,
    "119": 502,
    "111": 508,
    "106": 509,
}

# Extension → number presented when the station calls out.
DEFAULT_TRUNKS: dict[int, str] = {
    501: "79235253998",
    502: "79235254061",
    503: "79235254150",
    504: "79235254132",
    505: "79235254389",
    506: "79235254439",
    507: "79235254667",
    508: "79235254706",
    509: "79235255049",
    510: "79235255136",
}


@dataclass(frozen=True)
class RoutingTables:
    """The two fixed mappings consulted by the resolver.

    Build with default(), from_mappings() or from_yaml(); the constructor does
    no validation.
    """
    number_to_extension: Mapping[str, int]
    extension_to_trunk: Mapping[int, str]

    def lookup_extension(self, number: str) -> Optional[int]:
        """Exact-match lookup of a canonical number or short code."""
        return self.number_to_extension.get(number)

    def lookup_trunk(self, extension: Optional[int]) -> Optional[str]:
        """Exact-match lookup of the outbound trunk for an extension."""
        if extension is None:
            return None
        return self.extension_to_trunk.get(extension)

    @property
    def extensions(self) -> frozenset[int]:
        """Every extension that appears in either mapping."""
        return frozenset(self.number_to_extension.values()) | frozenset(self.extension_to_trunk)

    @classmethod
    def default(cls) -> "RoutingTables":
        """The compiled-in tables."""
        return cls.from_mappings(DEFAULT_NUMBERS, DEFAULT_TRUNKS, DEFAULT_SHORT_CODES)

    @classmethod
    def from_mappings(
        cls,
        numbers: Mapping,
        trunks: Mapping,
        short_codes: Optional[Mapping] = None,
    ) -> "RoutingTables":
        """Validate raw mappings and freeze them.

        Keys and values may be given as str or int (YAML gives either).

        Raises:
            RoutingTableError: On a malformed number or extension, a number
                or short code given twice, or a trunk number shared by two
                extensions.
        """
        number_to_extension: dict[str, int] = {}
        for number, ext in numbers.items():
            key = _digits(number, "number")
            if len(key) != 11 or not key.startswith(TRUNK_PREFIX):
                raise RoutingTableError(f"Not a canonical 11-digit number: {number!r}")
            if key in number_to_extension:
                raise RoutingTableError(f"Number defined twice: {number!r}")
            number_to_extension[key] = _extension(ext)

        for code, ext in (short_codes or {}).items():
            key = _digits(code, "short code")
            if len(key) != 3:
                raise RoutingTableError(f"Short code must be 3 digits: {code!r}")
            if key in number_to_extension:
                raise RoutingTableError(f"Short code defined twice: {code!r}")
            number_to_extension[key] = _extension(ext)

        extension_to_trunk: dict[int, str] = {}
        seen_trunks: dict[str, int] = {}
        for ext, trunk in trunks.items():
            ext_key = _extension(ext)
            if ext_key in extension_to_trunk:
                raise RoutingTableError(f"Extension {ext_key} has two trunks")
            trunk_number = _digits(trunk, "trunk")
            if len(trunk_number) != 11 or not trunk_number.startswith(TRUNK_PREFIX):
                raise RoutingTableError(f"Not a canonical 11-digit trunk: {trunk!r}")
            if trunk_number in seen_trunks:
                raise RoutingTableError(
                    f"Trunk {trunk_number} assigned to both {seen_trunks[trunk_number]} and {ext_key}"
                )
            seen_trunks[trunk_number] = ext_key
            extension_to_trunk[ext_key] = trunk_number

        return cls(
            number_to_extension=MappingProxyType(number_to_extension),
            extension_to_trunk=MappingProxyType(extension_to_trunk),
        )

    @classmethod
    def from_yaml(cls, path: str) -> "RoutingTables":
        """Load routing tables from a YAML file.

        Raises:
            RoutingTableError: If the file cannot be read, parsed or validated.
        """
        tables_path = Path(path).expanduser()
        try:
            with open(tables_path) as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            raise RoutingTableError(f"Failed to load routing tables from {tables_path}: {e}") from e

        if not isinstance(data, dict):
            raise RoutingTableError(f"Routing tables in {tables_path} must be a mapping")

        sections = {}
        for name in ("numbers", "short_codes", "trunks"):
            section = data.get(name) or {}
            if not isinstance(section, dict):
                raise RoutingTableError(f"Section {name!r} in {tables_path} must be a mapping")
            sections[name] = section

        tables = cls.from_mappings(sections["numbers"], sections["trunks"], sections["short_codes"])
        logger.info(
            "Routing tables loaded: %d numbers, %d trunks from %s",
            len(tables.number_to_extension),
            len(tables.extension_to_trunk),
            tables_path,
        )
        return tables


def _digits(value, what: str) -> str:
    text = str(value).strip()
    if not text.isascii() or not text.isdigit():
        raise RoutingTableError(f"Invalid {what}: {value!r}")
    return text


def _extension(value) -> int:
    if isinstance(value, bool):
        raise RoutingTableError(f"Invalid extension: {value!r}")
    try:
        ext = int(value)
    except (TypeError, ValueError) as e:
        raise RoutingTableError(f"Invalid extension: {value!r}") from e
    if ext <= 0:
        raise RoutingTableError(f"Invalid extension: {value!r}")
    return ext
