# =============================================================================
# trade_tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines every MCP tool the agent can call.  Each tool is a thin wrapper
#   around trade_core/: it clamps the page size, builds the query, sends it
#   to the gateway and hands back the raw GraphQL response.
#
# HOW IT WORKS (the flow):
#   1. The agent decides it needs data (e.g., 2024 exports by area)
#   2. It calls a tool by name via MCP (e.g., "query_trade_monthly_by_group")
#   3. FastMCP routes the call to the matching function below
#   4. The function calls trade_core.build_query + execute_graphql
#   5. The agent receives the GraphQL response (or an error dict)
#
# TOOLS:
#   introspect_schema              cached schema introspection
#   query_graphql                  raw query pass-through (last resort)
#   list_resolvers                 what tables exist and which fields they have
#   query_hscode_reference         UNION_REF_HSCODE
#   query_country_area_reference   UNION_REF_COUNTRY_AREA
#   query_trade_monthly_by_code    trade_monthly_by_code_country
#   query_trade_monthly_by_group   trade_monthly_by_group_country (friendly params)
#   query_trade_transactions       TXN_MOF_NON_PROTECT_MT (large, slow)
#
#   Every snake_case name is also registered as a camelCase alias
#   (queryTradeTransactions, ...) because some MCP clients only emit those.
#
# ERRORS:
#   A TradeQueryError (unknown resolver, gateway failure...) becomes
#   {"error": "<what failed>", "details": "<message>"}.  Other exceptions
#   are bugs and propagate to FastMCP.
#
# RUNNING THIS SERVER:
#   a) stdio (default, used by the ADK agent):  python -m trade_tools.mcp_server
#   b) HTTP:  MCP_TRANSPORT=streamable-http MCP_PORT=3000 python -m trade_tools.mcp_server
#      (adds GET /health)
# =============================================================================

import json
import logging
import re
import sys
from typing import Any, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

# .env must be loaded before Settings.from_env() reads the environment.
load_dotenv()

from trade_core.config import Settings
from trade_core.errors import TradeQueryError
from trade_core.graphql_client import execute_graphql
from trade_core.query_builder import build_query
from trade_core.registry import describe_resolvers
from trade_core.schema_cache import SchemaCache
from trade_core.trade_filters import build_monthly_by_group_filter

settings = Settings.from_env()
schema_cache = SchemaCache(
    ttl_seconds=settings.schema_cache_ttl_seconds,
    cache_file=settings.schema_cache_file,
)

# =============================================================================
# Logging Setup
# =============================================================================
# Log to STDERR: with the stdio transport, STDOUT *is* the MCP channel and
# any stray log line there corrupts the JSON protocol.
#
#   CYAN    incoming tool calls
#   YELLOW  intermediate status
#   GREEN   responses (truncated; query results can be large)
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

_RESPONSE_LOG_LIMIT = 500

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if v is not None)
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    """Log the (truncated) response as compact JSON in GREEN, then return it."""
    text = json.dumps(result, separators=(",", ":"), ensure_ascii=False)
    if len(text) > _RESPONSE_LOG_LIMIT:
        text = text[:_RESPONSE_LOG_LIMIT] + f"... ({len(text)} chars)"
    logging.info(f"{_GREEN}  ← {tool_name} response: {text}{_RESET}")
    return result


def _error(tool_name: str, summary: str, err: Exception) -> dict:
    _log_status(f"{type(err).__name__}: {err}")
    return _log_response(tool_name, {"error": summary, "details": str(err)})


def _execute(query: str, variables: Optional[dict] = None) -> dict:
    return execute_graphql(
        query,
        endpoint=settings.graphql_endpoint,
        subscription_key=settings.subscription_key,
        variables=variables,
    )


def _run_resolver_query(tool_name: str, resolver_key: str, summary: str, params: dict) -> dict:
    """Shared body of the structured resolver tools."""
    try:
        query = build_query(resolver_key, params)
        _log_status(f"Built query for {resolver_key} ({len(query)} chars)")
        result = _execute(query)
    except TradeQueryError as e:
        return _error(tool_name, summary, e)
    return _log_response(tool_name, result)


# =============================================================================
# FastMCP server instance
# =============================================================================
mcp = FastMCP(
    "taiwan-trade-analytics",
    instructions=(
        "Taiwan import/export trade statistics over a GraphQL API. "
        "Prefer the monthly tools (by code / by group) over raw transactions; "
        "use the reference tools to look up HS Codes and country/area codes; "
        "use query_graphql only when no structured tool fits."
    ),
)


# =============================================================================
# TOOL: introspect_schema
# =============================================================================
# The schema is large (~110KB).  It is cached in memory and on disk for
# SCHEMA_CACHE_TTL_SECONDS, so the agent can call this freely.
# =============================================================================
INTROSPECTION_QUERY = """
query IntrospectionQuery {
  __schema {
    queryType { name }
    mutationType { name }
    subscriptionType { name }
    types { ...FullType }
    directives {
      name
      description
      locations
      args { ...InputValue }
    }
  }
}
fragment FullType on __Type {
  kind
  name
  description
  fields(includeDeprecated: true) {
    name
    description
    args { ...InputValue }
    type { ...TypeRef }
    isDeprecated
    deprecationReason
  }
  inputFields { ...InputValue }
  interfaces { ...TypeRef }
  enumValues(includeDeprecated: true) {
    name
    description
    isDeprecated
    deprecationReason
  }
  possibleTypes { ...TypeRef }
}
fragment InputValue on __InputValue {
  name
  description
  type { ...TypeRef }
  defaultValue
}
fragment TypeRef on __Type {
  kind
  name
  ofType {
    kind
    name
    ofType {
      kind
      name
      ofType {
        kind
        name
        ofType {
          kind
          name
          ofType {
            kind
            name
            ofType { kind name }
          }
        }
      }
    }
  }
}
"""


def introspect_schema(force_refresh: bool = False) -> dict:
    """Get the full GraphQL schema of the trade API (cached).

    WHEN TO CALL THIS: Only when you need to check a type, an input field or
    a filter operator that the structured tools don't document.  Usually
    once per conversation at most; the structured query tools are easier.

    Args:
        force_refresh: True to bypass the cache and re-fetch from the API.

    Returns:
        The introspection response plus "_source" ("cache" or "api"); cache
        hits also carry "_cache_age" in seconds.
    """
    _log_request("introspect_schema", force_refresh=force_refresh)

    if not force_refresh:
        cached = schema_cache.get()
        if cached is not None:
            _log_status("Serving schema from cache")
            status = schema_cache.status()
            return _log_response("introspect_schema", {
                "_source": "cache",
                "_cache_age": status["memory_cache_age"],
                **cached,
            })

    try:
        result = _execute(INTROSPECTION_QUERY)
    except TradeQueryError as e:
        return _error("introspect_schema", "Schema introspection failed", e)

    schema_cache.set(result)
    return _log_response("introspect_schema", {"_source": "api", **result})


# =============================================================================
# TOOL: query_graphql
# =============================================================================
def query_graphql(query: str, variables: Optional[dict[str, Any]] = None) -> dict:
    """Run an arbitrary GraphQL query against the trade API.

    WHEN TO CALL THIS: Only when none of the structured query tools can
    express what you need.  Note the gateway does NOT accept variable
    definitions in the query text; inline all argument values.

    Query fields available: uNION_REF_HSCODEs, trade_monthly_by_code_countries,
    trade_monthly_by_group_countries, uNION_REF_COUNTRY_AREAs,
    tXN_MOF_NON_PROTECT_MTs.  Each takes first / after / filter / orderBy and
    returns items, endCursor, hasNextPage (and optionally groupBy).

    Args:
        query: Complete GraphQL query text.
        variables: Optional variables object.

    Returns:
        The raw GraphQL response ({"data": ...}).
    """
    _log_request("query_graphql", query=query, variables=variables)
    try:
        result = _execute(query, variables or {})
    except TradeQueryError as e:
        return _error("query_graphql", "GraphQL query failed", e)
    return _log_response("query_graphql", result)


# =============================================================================
# TOOL: list_resolvers
# =============================================================================
def list_resolvers() -> dict:
    """List the queryable trade tables with their fields and numeric fields.

    WHEN TO CALL THIS: When unsure which field names a table has, or which
    fields can be used in aggregations (sum/avg/min/max).
    """
    _log_request("list_resolvers")
    return _log_response("list_resolvers", {"resolvers": describe_resolvers()})


# =============================================================================
# STRUCTURED RESOLVER TOOLS
# =============================================================================
# These share one parameter shape:
#   first         page size (default DEFAULT_PAGE_SIZE, capped at MAX_PAGE_SIZE)
#   after         cursor from the previous page's endCursor
#   filter        {FIELD: {op: value}, and: [...], or: [...]}
#                 string ops: eq, neq, contains, startsWith, endsWith, isNull, in
#                 number/date ops: eq, neq, gt, gte, lt, lte, isNull, in
#   order_by      {FIELD: "ASC" | "DESC"}
#   fields        fields to return (unknown names are ignored)
#   group_by      fields to group by (unknown names are ignored)
#   aggregations  [{"field": ..., "function": sum|avg|min|max|count}]
#
# filter and order_by are JSON objects, not strings.
# =============================================================================
def _structured_params(
    first, after, filter, order_by, fields, group_by, aggregations,
) -> dict:
    return {
        "first": settings.clamp_page_size(first),
        "after": after,
        "filter": filter,
        "orderBy": order_by,
        "fields": fields,
        "groupBy": group_by,
        "aggregations": aggregations,
    }


def query_hscode_reference(
    first: Optional[int] = None,
    after: Optional[str] = None,
    filter: Optional[dict[str, Any]] = None,
    order_by: Optional[dict[str, str]] = None,
    fields: Optional[list[str]] = None,
    group_by: Optional[list[str]] = None,
    aggregations: Optional[list[dict[str, str]]] = None,
) -> dict:
    """Query the HS Code reference table (UNION_REF_HSCODE).

    WHEN TO CALL THIS: To translate between product names and HS Codes, or
    to find which industry an HS Code belongs to, before querying trade data.

    Fields: Report_ID, Industry_ID, Industry, HS_Code_Group, HS_Code,
    HS_Code_ZH (Chinese product name), Unit_Name, Unit.
    Numeric (aggregatable): Industry_ID.

    Examples:
        filter={"HS_Code": {"startsWith": "8542"}}
        filter={"HS_Code_ZH": {"contains": "積體電路"}}
        group_by=["Industry"]   (count of HS Codes per industry)
    """
    _log_request("query_hscode_reference", first=first, after=after, filter=filter,
                 order_by=order_by, fields=fields, group_by=group_by,
                 aggregations=aggregations)
    return _run_resolver_query(
        "query_hscode_reference", "UNION_REF_HSCODE",
        "HS Code reference query failed",
        _structured_params(first, after, filter, order_by, fields, group_by, aggregations),
    )


def query_country_area_reference(
    first: Optional[int] = None,
    after: Optional[str] = None,
    filter: Optional[dict[str, Any]] = None,
    order_by: Optional[dict[str, str]] = None,
    fields: Optional[list[str]] = None,
    group_by: Optional[list[str]] = None,
    aggregations: Optional[list[dict[str, str]]] = None,
) -> dict:
    """Query the country / area reference table (UNION_REF_COUNTRY_AREA).

    WHEN TO CALL THIS: To look up a country's ISO3 code, its Chinese or
    English name, or which area (Asia, Europe...) it belongs to.

    Fields: ISO3, COUNTRY_COMM_ZH, COUNTRY_COMM_EN, AREA_ID, AREA_NM, ROW,
    AREA_sort.  Numeric (aggregatable): ROW, AREA_sort.

    Examples:
        filter={"ISO3": {"eq": "USA"}}
        filter={"AREA_NM": {"eq": "亞洲"}}
        group_by=["AREA_NM"]   (countries per area)
    """
    _log_request("query_country_area_reference", first=first, after=after, filter=filter,
                 order_by=order_by, fields=fields, group_by=group_by,
                 aggregations=aggregations)
    return _run_resolver_query(
        "query_country_area_reference", "UNION_REF_COUNTRY_AREA",
        "Country/area reference query failed",
        _structured_params(first, after, filter, order_by, fields, group_by, aggregations),
    )


def query_trade_monthly_by_code(
    first: Optional[int] = None,
    after: Optional[str] = None,
    filter: Optional[dict[str, Any]] = None,
    order_by: Optional[dict[str, str]] = None,
    fields: Optional[list[str]] = None,
    group_by: Optional[list[str]] = None,
    aggregations: Optional[list[dict[str, str]]] = None,
) -> dict:
    """Query monthly trade statistics per HS Code and country.

    WHEN TO CALL THIS: The default tool for product-level trade questions
    ("semiconductor exports to the US in 2024").  Data is pre-aggregated per
    month, so it is much faster than query_trade_transactions.

    Fields: PERIOD_MONTH, YEAR, MONTH, TRADE_FLOW ("1"=export, "2"=import),
    HS_CODE, HS_CODE_ZH, COUNTRY_ID (ISO3), COUNTRY_COMM_ZH,
    TRADE_VALUE_USD_AMT, TRADE_VALUE_TWD_AMT, TRADE_WEIGHT, TRADE_QUANT,
    UNIT_PRICE_USD_PER_KG, ETL_DT.
    Numeric: YEAR, MONTH, TRADE_VALUE_USD_AMT, TRADE_VALUE_TWD_AMT,
    TRADE_WEIGHT, TRADE_QUANT, UNIT_PRICE_USD_PER_KG.

    Always narrow by YEAR or PERIOD_MONTH.

    Examples:
        filter={"YEAR": {"eq": 2024}, "TRADE_FLOW": {"eq": "1"}, "HS_CODE": {"startsWith": "8542"}}
        order_by={"PERIOD_MONTH": "ASC"}
        group_by=["COUNTRY_ID"], aggregations=[{"field": "TRADE_VALUE_USD_AMT", "function": "sum"}]
    """
    _log_request("query_trade_monthly_by_code", first=first, after=after, filter=filter,
                 order_by=order_by, fields=fields, group_by=group_by,
                 aggregations=aggregations)
    return _run_resolver_query(
        "query_trade_monthly_by_code", "trade_monthly_by_code_country",
        "Trade monthly by code query failed",
        _structured_params(first, after, filter, order_by, fields, group_by, aggregations),
    )


def query_trade_monthly_by_group(
    year: Optional[int] = None,
    trade_flow: Optional[str] = None,
    industry_keyword: Optional[str] = None,
    country: Optional[str] = None,
    order: Optional[str] = None,
    first: Optional[int] = None,
    group_by: Optional[list[str]] = None,
    aggregations: Optional[list[dict[str, str]]] = None,
) -> dict:
    """Query monthly trade statistics per industry group and country.

    WHEN TO CALL THIS: For industry-level or area-level questions ("how did
    electronics exports to Southeast Asia do in 2024?").  The table already
    carries area columns, so no country lookup is needed first.

    Args:
        year: e.g. 2024.
        trade_flow: "出口"/"export" or "進口"/"import".
        industry_keyword: Matched with contains on INDUSTRY, e.g. "電子".
        country: ISO2 code ("US"), area code ("EUROPE"), or a Chinese
            country / area name ("美國", "東南亞").
        order: "ASC" or "DESC", by PERIOD_MONTH.
        first: Rows to return (default 50).
        group_by: e.g. ["INDUSTRY", "AREA_NM"].
        aggregations: e.g. [{"field": "TRADE_VALUE_USD_AMT", "function": "sum"}].
    """
    _log_request("query_trade_monthly_by_group", year=year, trade_flow=trade_flow,
                 industry_keyword=industry_keyword, country=country, order=order,
                 first=first, group_by=group_by, aggregations=aggregations)

    filter_ = build_monthly_by_group_filter(
        year=year, trade_flow=trade_flow,
        industry_keyword=industry_keyword, country=country,
    )
    _log_status(f"Filter: {filter_}")

    params = {
        "filter": filter_,
        "orderBy": {"PERIOD_MONTH": order} if order else None,
        "first": settings.clamp_page_size(first, default=50),
        "groupBy": group_by,
        "aggregations": aggregations,
    }
    return _run_resolver_query(
        "query_trade_monthly_by_group", "trade_monthly_by_group_country",
        "Trade monthly by group query failed", params,
    )


def query_trade_transactions(
    first: Optional[int] = None,
    after: Optional[str] = None,
    filter: Optional[dict[str, Any]] = None,
    order_by: Optional[dict[str, str]] = None,
    fields: Optional[list[str]] = None,
    group_by: Optional[list[str]] = None,
    aggregations: Optional[list[dict[str, str]]] = None,
) -> dict:
    """Query the raw trade transaction table (TXN_MOF_NON_PROTECT_MT).

    WHEN TO CALL THIS: Last resort.  Only when the monthly tools cannot
    answer: daily dates (TXN_DT), English names (HS_CODE_EN, COUNTRY_EN),
    exchange rate (RATE_VALUE) or original weight (TRADE_WEIGHT_ORG).
    The table is huge: ALWAYS filter on a TXN_DT range and keep first small
    (100-500).

    Fields: TXN_DT, HS_CODE, HS_CODE_ZH, HS_CODE_EN, COUNTRY_ID, COUNTRY_ZH,
    COUNTRY_EN, COUNTRY_COMM_ZH, COUNTRY_COMM_EN, TRADE_FLOW,
    TRADE_VALUE_TWD_AMT, TRADE_QUANT, TRADE_WEIGHT_ORG, TRADE_WEIGHT,
    RATE_VALUE, TRADE_VALUE_USD_AMT, ETL_DT.

    Example:
        filter={"TXN_DT": {"gte": "2024-06-01T00:00:00Z", "lte": "2024-06-30T23:59:59Z"},
                "HS_CODE": {"startsWith": "8542"}}
    """
    _log_request("query_trade_transactions", first=first, after=after, filter=filter,
                 order_by=order_by, fields=fields, group_by=group_by,
                 aggregations=aggregations)
    return _run_resolver_query(
        "query_trade_transactions", "TXN_MOF_NON_PROTECT_MT",
        "Trade transaction query failed",
        _structured_params(first, after, filter, order_by, fields, group_by, aggregations),
    )


# =============================================================================
# Tool registration (+ camelCase aliases)
# =============================================================================
TOOLS = [
    introspect_schema,
    query_graphql,
    list_resolvers,
    query_hscode_reference,
    query_country_area_reference,
    query_trade_monthly_by_code,
    query_trade_monthly_by_group,
    query_trade_transactions,
]


def camel_case(name: str) -> str:
    """query_trade_transactions → queryTradeTransactions"""
    return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), name)


def tool_names(include_aliases: bool = False) -> list[str]:
    names = [fn.__name__ for fn in TOOLS]
    if include_aliases:
        names += [camel_case(n) for n in names if camel_case(n) != n]
    return names


def _register_tools(server: FastMCP) -> None:
    for fn in TOOLS:
        server.tool(name=fn.__name__)(fn)
        alias = camel_case(fn.__name__)
        if alias != fn.__name__:
            description = f"{(fn.__doc__ or '').strip()}\n\n(alias for {fn.__name__})"
            server.tool(name=alias, description=description)(fn)


_register_tools(mcp)


# =============================================================================
# Health check (HTTP transport only)
# =============================================================================
@mcp.custom_route("/health", methods=["GET"])
async def health(_request: Request) -> JSONResponse:
    return JSONResponse({
        "status": "healthy",
        "server": mcp.name,
        "tools": tool_names(),
        "schema_cache": schema_cache.status(),
        "endpoint": "configured" if settings.graphql_endpoint else "missing",
    })


# =============================================================================
# Server entry point
# =============================================================================
def main() -> None:
    settings.validate()
    if settings.transport == "stdio":
        mcp.run()
    else:
        logging.info(f"Starting {mcp.name} on {settings.host}:{settings.port} ({settings.transport})")
        mcp.run(transport=settings.transport, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
