# =============================================================================
# trade_core/query_builder.py  —  GraphQL query assembly
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns (resolver key, parameter bag) into a complete GraphQL query
#   string with every argument inlined:
#
#     query {
#       trade_monthly_by_group_countries(first: 50, filter: { YEAR: { eq: 2024 } }) {
#         items {
#           YEAR
#           AREA_NM
#         }
#         endCursor
#         hasNextPage
#         groupBy(fields: [AREA_NM]) {
#           fields {
#             AREA_NM
#           }
#           aggregations {
#             sum(field: TRADE_VALUE_USD_AMT)
#           }
#         }
#       }
#     }
#
# LENIENCY POLICY:
#   - unknown names in `fields` / `group_by` are dropped, not rejected
#   - an aggregation on a missing / non-numeric field, or with an unknown
#     function, becomes a bare `count`
#   Only an unknown resolver key (or an unserializable filter value) raises.
#
# `endCursor` and `hasNextPage` are always selected, grouped or not; the
# gateway expects that response shape for every resolver.
#
# The builder is pure: same input (same dict key order) → same string.
# =============================================================================

import logging
from collections.abc import Iterable, Mapping
from typing import Optional, Union

from trade_core.literals import to_literal
from trade_core.models import Aggregation, QueryParams
from trade_core.registry import lookup

logger = logging.getLogger(__name__)

AGGREGATE_FUNCTIONS = frozenset({"sum", "avg", "min", "max", "count"})

_INDENT = "  "


def _block(header: str, lines: Iterable[str], depth: int) -> list[str]:
    """Render `header { ...lines... }` at the given depth, one line per entry."""
    pad = _INDENT * depth
    inner = _INDENT * (depth + 1)
    out = [f"{pad}{header} {{"]
    for line in lines:
        out.extend(f"{inner}{part}" for part in line.split("\n"))
    out.append(f"{pad}}}")
    return out


def _aggregation_lines(requested, numeric_fields) -> list[str]:
    if not requested:
        return ["count"]

    numeric = set(numeric_fields)
    parts = []
    for item in requested:
        agg = Aggregation.from_value(item)
        fn = agg.function or "sum"
        # Only string names are usable; lists or dicts from JSON fall back to count.
        usable = isinstance(agg.field, str) and isinstance(fn, str)
        if usable and agg.field in numeric and fn in AGGREGATE_FUNCTIONS:
            parts.append(f"{fn}(field: {agg.field})")
        else:
            parts.append("count")

    # dict.fromkeys: dedup keeping first-seen order
    return list(dict.fromkeys(parts))


def build_aggregations(requested, numeric_fields, depth: int = 0) -> str:
    """Build the `aggregations { ... }` block for a group-by query.

    Args:
        requested: Aggregation objects or {"field", "function"} mappings.
            None / empty means "just count the rows".
        numeric_fields: Fields that may be aggregated for this resolver.
        depth: Indentation level of the block (used when nesting).

    Returns:
        The block text.  Never empty: at minimum it holds a bare `count`.
        Identical fragments are emitted once.
    """
    lines = _aggregation_lines(requested, numeric_fields)
    return "\n".join(_block("aggregations", lines, depth))


def _known(names: Optional[Iterable[str]], allowed: tuple[str, ...]) -> list[str]:
    return [name for name in (names or []) if name in allowed]


def _arguments(params: QueryParams) -> str:
    args = []
    if params.first is not None:
        args.append(f"first: {to_literal(params.first)}")
    if params.after is not None:
        args.append(f"after: {to_literal(params.after)}")
    if isinstance(params.filter, Mapping) and params.filter:
        args.append(f"filter: {to_literal(params.filter)}")
    if isinstance(params.order_by, Mapping) and params.order_by:
        args.append(f"orderBy: {to_literal(params.order_by)}")
    return f"({', '.join(args)})" if args else ""


def build_query(resolver_key: str, params: Union[QueryParams, Mapping, None] = None) -> str:
    """Build the inline-literal GraphQL query for one resolver call.

    Args:
        resolver_key: A key of RESOLVER_REGISTRY (e.g. "UNION_REF_COUNTRY_AREA").
        params: QueryParams, or a dict with any of first, after, filter,
            orderBy/order_by, fields, groupBy/group_by, aggregations.

    Returns:
        The query text, ready to POST as {"query": ...}.

    Raises:
        UnknownResolverError: if resolver_key is not registered.
        InvalidLiteralError: if an argument value cannot be serialized.
    """
    descriptor = lookup(resolver_key)
    params = QueryParams.from_mapping(params)

    args = _arguments(params)

    selected = (
        _known(params.fields, descriptor.fields) if params.fields
        else list(descriptor.fields)
    )

    body = _block("items", selected, 2)
    body += [f"{_INDENT * 2}endCursor", f"{_INDENT * 2}hasNextPage"]

    if params.group_by:
        group_fields = _known(params.group_by, descriptor.fields)
        body += _block(
            f"groupBy(fields: [{', '.join(group_fields)}])",
            ["\n".join(_block("fields", group_fields, 0)),
             build_aggregations(params.aggregations, descriptor.numeric_fields)],
            2,
        )

    lines = ["query {", f"{_INDENT}{descriptor.query_name}{args} {{", *body, f"{_INDENT}}}", "}"]

    logger.debug("resolver: %s", descriptor.query_name)
    logger.debug("inline args: %s", args)

    return "\n".join(lines)
