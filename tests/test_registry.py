"""Tests for the resolver registry."""

import pytest

from trade_core.errors import UnknownResolverError
from trade_core.models import ResolverDescriptor
from trade_core.registry import (
    RESOLVER_REGISTRY,
    describe_resolvers,
    lookup,
    resolver_keys,
)

EXPECTED_KEYS = [
    "UNION_REF_HSCODE",
    "trade_monthly_by_code_country",
    "trade_monthly_by_group_country",
    "UNION_REF_COUNTRY_AREA",
    "TXN_MOF_NON_PROTECT_MT",
]


class TestRegistryContents:
    """Tests for the static registry data."""

    def test_five_resolvers(self) -> None:
        assert resolver_keys() == EXPECTED_KEYS

    @pytest.mark.parametrize("key", EXPECTED_KEYS)
    def test_numeric_fields_are_fields(self, key) -> None:
        descriptor = RESOLVER_REGISTRY[key]
        assert set(descriptor.numeric_fields) <= set(descriptor.fields)

    def test_country_area_descriptor(self) -> None:
        descriptor = lookup("UNION_REF_COUNTRY_AREA")
        assert descriptor.query_name == "uNION_REF_COUNTRY_AREAs"
        assert descriptor.fields[0] == "ISO3"
        assert descriptor.numeric_fields == ("ROW", "AREA_sort")

    def test_registry_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            RESOLVER_REGISTRY["NEW"] = RESOLVER_REGISTRY["UNION_REF_HSCODE"]

    def test_descriptor_is_frozen(self) -> None:
        descriptor = lookup("UNION_REF_HSCODE")
        with pytest.raises(AttributeError):
            descriptor.query_name = "other"


class TestLookup:
    """Tests for lookup()."""

    def test_unknown_key_raises(self) -> None:
        with pytest.raises(UnknownResolverError) as exc_info:
            lookup("unknown-key")
        assert exc_info.value.key == "unknown-key"
        assert exc_info.value.available == EXPECTED_KEYS
        assert "unknown-key" in str(exc_info.value)
        assert "UNION_REF_HSCODE" in str(exc_info.value)

    def test_lookup_is_case_sensitive(self) -> None:
        with pytest.raises(UnknownResolverError):
            lookup("union_ref_hscode")


class TestDescriptorValidation:
    """Tests for ResolverDescriptor invariants."""

    def test_numeric_field_outside_fields_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            ResolverDescriptor(query_name="things", fields=("A",), numeric_fields=("B",))


def test_describe_resolvers() -> None:
    described = describe_resolvers()
    assert [d["key"] for d in described] == EXPECTED_KEYS
    hscode = described[0]
    assert hscode["query_name"] == "uNION_REF_HSCODEs"
    assert hscode["numeric_fields"] == ["Industry_ID"]
    assert isinstance(hscode["fields"], list)
