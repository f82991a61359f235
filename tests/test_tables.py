"""Tests for RoutingTables."""

import dataclasses

import pytest

from pbx_dialplan.exceptions import RoutingTableError
from pbx_dialplan.tables import DEFAULT_NUMBERS, DEFAULT_TRUNKS, RoutingTables


class TestDefaultTables:
    def test_lookup_did(self, tables):
        assert tables.lookup_extension("79235254061") == 502
        assert tables.lookup_extension("73843731500") == 510

    def test_lookup_short_code(self, tables):
        assert tables.lookup_extension("104") == 501
        assert tables.lookup_extension("135") == 502
        assert tables.lookup_extension("119") == 502

    def test_lookup_missing(self, tables):
        assert tables.lookup_extension("999") is None
        assert tables.lookup_extension("74951234567") is None
        assert tables.lookup_extension("") is None

    def test_lookup_trunk(self, tables):
        assert tables.lookup_trunk(501) == "79235253998"
        assert tables.lookup_trunk(510) == "79235255136"

    def test_lookup_trunk_missing(self, tables):
        assert tables.lookup_trunk(999) is None
        assert tables.lookup_trunk(None) is None

    def test_many_numbers_one_extension(self, tables):
        numbers = [n for n, ext in tables.number_to_extension.items() if ext == 508]
        assert sorted(numbers) == ["111", "73843600911", "73843731458", "79235254706"]

    def test_extensions(self, tables):
        assert tables.extensions == frozenset(range(501, 511))

    def test_every_trunk_rings_its_own_extension(self, tables):
        for ext, trunk in DEFAULT_TRUNKS.items():
            assert DEFAULT_NUMBERS[trunk] == ext

    def test_repeated_lookups_stable(self, tables):
        first = [tables.lookup_extension(n) for n in ("104", "79235254061", "000")]
        second = [tables.lookup_extension(n) for n in ("104", "79235254061", "000")]
        assert first == second
        assert tables.lookup_trunk(503) == tables.lookup_trunk(503)


class TestImmutability:
    def test_mappings_read_only(self, tables):
        with pytest.raises(TypeError):
            tables.number_to_extension["71111111111"] = 501
        with pytest.raises(TypeError):
            tables.extension_to_trunk[501] = "71111111111"

    def test_dataclass_frozen(self, tables):
        with pytest.raises(dataclasses.FrozenInstanceError):
            tables.number_to_extension = {}

    def test_source_dict_changes_do_not_leak(self):
        numbers = {"71112223344": 201}
        tables = RoutingTables.from_mappings(numbers, {})
        numbers["71112223355"] = 202
        assert tables.lookup_extension("71112223355") is None


class TestValidation:
    def test_int_keys_accepted(self):
        tables = RoutingTables.from_mappings({71112223344: "201"}, {"201": 71112223344})
        assert tables.lookup_extension("71112223344") == 201
        assert tables.lookup_trunk(201) == "71112223344"

    @pytest.mark.parametrize("number", ["7111222334", "81112223344", "7111222334x", "104"])
    def test_bad_number_rejected(self, number):
        with pytest.raises(RoutingTableError):
            RoutingTables.from_mappings({number: 201}, {})

    @pytest.mark.parametrize("code", ["10", "1040", "1a4"])
    def test_bad_short_code_rejected(self, code):
        with pytest.raises(RoutingTableError):
            RoutingTables.from_mappings({}, {}, {code: 201})

    @pytest.mark.parametrize("ext", [0, -5, "abc", None, True])
    def test_bad_extension_rejected(self, ext):
        with pytest.raises(RoutingTableError):
            RoutingTables.from_mappings({"71112223344": ext}, {})

    def test_number_given_as_str_and_int_rejected(self):
        with pytest.raises(RoutingTableError, match="defined twice"):
            RoutingTables.from_mappings({"79235253998": 501, 79235253998: 502}, {})

    def test_short_code_clashing_with_itself_rejected(self):
        with pytest.raises(RoutingTableError, match="defined twice"):
            RoutingTables.from_mappings({}, {}, {"104": 501, 104: 502})

    def test_extension_with_two_trunks_rejected(self):
        with pytest.raises(RoutingTableError, match="two trunks"):
            RoutingTables.from_mappings({}, {"501": "79235253998", 501: "79235254061"})

    def test_shared_trunk_rejected(self):
        with pytest.raises(RoutingTableError, match="assigned to both"):
            RoutingTables.from_mappings({}, {201: "71112223344", 202: "71112223344"})

    def test_bad_trunk_rejected(self):
        with pytest.raises(RoutingTableError):
            RoutingTables.from_mappings({}, {201: "104"})


class TestFromYaml:
    def test_load(self, tables_yaml):
        tables = RoutingTables.from_yaml(tables_yaml)
        assert tables.lookup_extension("71112223344") == 201
        assert tables.lookup_extension("100") == 201
        assert tables.lookup_trunk(201) == "71112223344"
        assert tables.lookup_trunk(202) is None
        assert tables.extensions == frozenset({201, 202})

    def test_missing_file(self, tmp_path):
        with pytest.raises(RoutingTableError, match="Failed to load"):
            RoutingTables.from_yaml(str(tmp_path / "nonexistent.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "tables.yaml"
        path.write_text("numbers: [unclosed\n")
        with pytest.raises(RoutingTableError):
            RoutingTables.from_yaml(str(path))

    def test_section_not_mapping(self, tmp_path):
        path = tmp_path / "tables.yaml"
        path.write_text("numbers:\n  - 71112223344\n")
        with pytest.raises(RoutingTableError, match="must be a mapping"):
            RoutingTables.from_yaml(str(path))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "tables.yaml"
        path.write_text("")
        tables = RoutingTables.from_yaml(str(path))
        assert tables.extensions == frozenset()
