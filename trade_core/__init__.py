# =============================================================================
# trade_core/__init__.py
# =============================================================================
# Query-building and transport logic for the trade GraphQL API.
#
# Nothing in this package imports FastMCP or Google ADK.  The query builder
# is pure and deterministic, so it can be tested without a network or an
# LLM; only graphql_client.py does I/O.
# =============================================================================

from trade_core.errors import (
    InvalidLiteralError,
    TradeQueryError,
    UnknownResolverError,
)
from trade_core.literals import to_literal
from trade_core.models import Aggregation, QueryParams, ResolverDescriptor
from trade_core.query_builder import build_aggregations, build_query
from trade_core.registry import RESOLVER_REGISTRY, describe_resolvers, lookup

__all__ = [
    "Aggregation",
    "InvalidLiteralError",
    "QueryParams",
    "RESOLVER_REGISTRY",
    "ResolverDescriptor",
    "TradeQueryError",
    "UnknownResolverError",
    "build_aggregations",
    "build_query",
    "describe_resolvers",
    "lookup",
    "to_literal",
]
