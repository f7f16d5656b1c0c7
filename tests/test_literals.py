"""Tests for GraphQL inline-literal serialization."""

import math

import pytest

from trade_core.errors import InvalidLiteralError
from trade_core.literals import to_literal


class TestScalars:
    """Tests for scalar values."""

    def test_none_is_null(self) -> None:
        assert to_literal(None) == "null"

    def test_booleans_are_bare(self) -> None:
        assert to_literal(True) == "true"
        assert to_literal(False) == "false"

    def test_integers(self) -> None:
        assert to_literal(2024) == "2024"
        assert to_literal(-7) == "-7"
        assert to_literal(1000000) == "1000000"

    def test_float(self) -> None:
        assert to_literal(3.5) == "3.5"

    def test_plain_string_is_quoted(self) -> None:
        assert to_literal("USA") == '"USA"'

    def test_non_ascii_string_is_kept_readable(self) -> None:
        assert to_literal("出口") == '"出口"'

    def test_string_escaping(self) -> None:
        assert to_literal('say "hi"\n') == '"say \\"hi\\"\\n"'

    def test_enum_values_are_bare(self) -> None:
        assert to_literal("ASC") == "ASC"
        assert to_literal("DESC") == "DESC"

    def test_enum_match_is_exact(self) -> None:
        """Only exact enum tokens are bare; lookalikes are quoted."""
        assert to_literal("asc") == '"asc"'
        assert to_literal("ASC_COMPANY") == '"ASC_COMPANY"'
        assert to_literal(" DESC") == '" DESC"'


class TestContainers:
    """Tests for lists and mappings."""

    def test_empty_list(self) -> None:
        assert to_literal([]) == "[]"

    def test_empty_mapping(self) -> None:
        assert to_literal({}) == "{  }"

    def test_list_of_strings(self) -> None:
        assert to_literal(["USA", "JPN"]) == '["USA", "JPN"]'

    def test_tuple_serializes_like_list(self) -> None:
        assert to_literal((1, 2)) == "[1, 2]"

    def test_mapping_keys_are_bare(self) -> None:
        assert to_literal({"ISO3": {"eq": "USA"}}) == '{ ISO3: { eq: "USA" } }'

    def test_order_by_enum_is_bare(self) -> None:
        result = to_literal({"ROW": "ASC"})
        assert result == "{ ROW: ASC }"
        assert '"ASC"' not in result

    def test_enum_lookalike_value_is_quoted(self) -> None:
        assert to_literal({"NAME": "ASC_COMPANY"}) == '{ NAME: "ASC_COMPANY" }'

    def test_compound_filter(self) -> None:
        result = to_literal({"and": [{"YEAR": {"eq": 2024}}, {"TRADE_FLOW": {"eq": "1"}}]})
        assert result == '{ and: [{ YEAR: { eq: 2024 } }, { TRADE_FLOW: { eq: "1" } }] }'
        assert '"YEAR"' not in result
        assert '"2024"' not in result
        assert '"1"' in result

    def test_key_order_is_preserved(self) -> None:
        assert to_literal({"b": 1, "a": 2}) == "{ b: 1, a: 2 }"

    def test_shared_reference_is_not_a_cycle(self) -> None:
        shared = {"eq": 1}
        assert to_literal({"A": shared, "B": shared}) == "{ A: { eq: 1 }, B: { eq: 1 } }"

    def test_null_inside_filter(self) -> None:
        assert to_literal({"ETL_DT": {"isNull": True}, "X": None}) == "{ ETL_DT: { isNull: true }, X: null }"


class TestInvalidLiterals:
    """Tests for values that cannot be serialized."""

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_numbers(self, value) -> None:
        with pytest.raises(InvalidLiteralError):
            to_literal({"TRADE_WEIGHT": {"gt": value}})

    def test_set_is_rejected(self) -> None:
        with pytest.raises(InvalidLiteralError):
            to_literal({"in": {"USA", "JPN"}})

    def test_callable_is_rejected(self) -> None:
        with pytest.raises(InvalidLiteralError):
            to_literal(lambda: None)

    def test_non_string_key_is_rejected(self) -> None:
        with pytest.raises(InvalidLiteralError):
            to_literal({1: "x"})

    @pytest.mark.parametrize("key", ["a: 1) { x } #", "1YEAR", "TRADE-FLOW", "", "YEAR\n", "年"])
    def test_key_that_is_not_a_graphql_name_is_rejected(self, key) -> None:
        with pytest.raises(InvalidLiteralError):
            to_literal({key: {"eq": 1}})

    def test_nested_bad_key_is_rejected(self) -> None:
        with pytest.raises(InvalidLiteralError):
            to_literal({"and": [{"YEAR } injected {": {"eq": 2024}}]})

    def test_name_keys_are_accepted(self) -> None:
        assert to_literal({"_x": 1, "AREA_sort": 2, "or": []}) == "{ _x: 1, AREA_sort: 2, or: [] }"

    def test_cyclic_list_is_rejected(self) -> None:
        cyclic = []
        cyclic.append(cyclic)
        with pytest.raises(InvalidLiteralError):
            to_literal(cyclic)

    def test_cyclic_mapping_is_rejected(self) -> None:
        cyclic = {"and": []}
        cyclic["and"].append(cyclic)
        with pytest.raises(InvalidLiteralError):
            to_literal(cyclic)
