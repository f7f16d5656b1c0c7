# =============================================================================
# trade_core/models.py  —  Data Models (the "nouns" of the query builder)
# =============================================================================
#
# These dataclasses define the shape of everything that flows through the
# query builder.  They carry almost no behavior.
#
#   ResolverDescriptor  static metadata for one upstream table/view
#   Aggregation         one requested {field, function} pair
#   QueryParams         the per-call parameter bag
#
# ResolverDescriptor and Aggregation are frozen: the registry is built once
# at import time and never changes.  QueryParams is never mutated by the
# builder either; a new query string is derived from it.
# =============================================================================

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional


# -----------------------------------------------------------------------------
# ResolverDescriptor: one upstream GraphQL resolver
# -----------------------------------------------------------------------------
# `fields` order is significant: it is the order the selection set is
# emitted in, and it is the "all fields" default.
#
# The *_type / *_enum names and the description are documentation only;
# nothing in the serializer reads them.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ResolverDescriptor:
    """Static metadata for one upstream table/view resolver."""

    query_name: str                    # e.g. "uNION_REF_HSCODEs"
    fields: tuple[str, ...]            # selectable scalar fields, canonical order
    numeric_fields: tuple[str, ...]    # aggregation targets (subset of fields)
    filter_input_type: str = ""
    order_by_input_type: str = ""
    scalar_fields_enum: str = ""
    numeric_aggregate_enum: str = ""
    description: str = ""

    def __post_init__(self):
        unknown = [f for f in self.numeric_fields if f not in self.fields]
        if unknown:
            raise ValueError(
                f"{self.query_name}: numeric fields not in fields: {', '.join(unknown)}"
            )


# -----------------------------------------------------------------------------
# Aggregation: a requested summary statistic
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Aggregation:
    """One aggregation request, e.g. sum(field: TRADE_VALUE_USD_AMT)."""

    field: Optional[str] = None
    function: str = "sum"

    @classmethod
    def from_value(cls, value: Any) -> "Aggregation":
        """Accept an Aggregation or a {"field", "function"} mapping."""
        if isinstance(value, Aggregation):
            return value
        if isinstance(value, Mapping):
            field_name = value.get("field")
            return cls(
                field=field_name if isinstance(field_name, str) else None,
                function=value.get("function") or "sum",
            )
        # Anything else has no usable field; it will be downgraded to count.
        return cls(field=None)


# -----------------------------------------------------------------------------
# QueryParams: what the caller asks for
# -----------------------------------------------------------------------------
# `filter` is an arbitrarily nested tree (with `and` / `or` lists) and is
# passed through to the literal serializer verbatim; it is NOT checked
# against the registry.
# -----------------------------------------------------------------------------
@dataclass
class QueryParams:
    """Parameters for a single query-builder call."""

    first: Optional[int] = None
    after: Optional[str] = None
    filter: Optional[dict] = None
    order_by: Optional[dict] = None
    fields: list[str] = field(default_factory=list)
    group_by: list[str] = field(default_factory=list)
    aggregations: list[Aggregation] = field(default_factory=list)

    # Tool callers speak camelCase (orderBy, groupBy); Python callers may
    # use snake_case.  Both spellings are accepted.
    _ALIASES = {"orderBy": "order_by", "groupBy": "group_by"}

    @classmethod
    def from_mapping(cls, params: Optional[Mapping]) -> "QueryParams":
        """Build QueryParams from a plain dict of tool arguments."""
        if params is None:
            return cls()
        if isinstance(params, QueryParams):
            return params

        values = {}
        for key, value in params.items():
            name = cls._ALIASES.get(key, key)
            if name in _PARAM_NAMES:
                values[name] = value

        return cls(
            first=values.get("first"),
            after=values.get("after"),
            filter=values.get("filter"),
            order_by=values.get("order_by"),
            fields=_name_list(values.get("fields")),
            group_by=_name_list(values.get("group_by")),
            aggregations=[
                Aggregation.from_value(a) for a in (values.get("aggregations") or [])
            ],
        )


_PARAM_NAMES = frozenset(
    {"first", "after", "filter", "order_by", "fields", "group_by", "aggregations"}
)


def _name_list(value) -> list:
    """A single field name means a one-element list, not its characters."""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)
