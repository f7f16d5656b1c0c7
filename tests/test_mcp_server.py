"""Tests for the MCP tool functions (gateway calls are faked)."""

import pytest

from trade_core.config import Settings
from trade_core.errors import GraphQLHTTPError
from trade_core.schema_cache import SchemaCache
from trade_tools import mcp_server


@pytest.fixture
def gateway(monkeypatch, tmp_path):
    """Fake execute_graphql; records every call and returns `reply`."""
    state = {"calls": [], "reply": {"data": {"ok": True}}}

    def _execute_graphql(query, endpoint, subscription_key, variables=None, timeout=30):
        state["calls"].append({
            "query": query,
            "endpoint": endpoint,
            "subscription_key": subscription_key,
            "variables": variables,
        })
        if isinstance(state["reply"], Exception):
            raise state["reply"]
        return state["reply"]

    monkeypatch.setattr(mcp_server, "execute_graphql", _execute_graphql)
    monkeypatch.setattr(mcp_server, "settings", Settings(
        graphql_endpoint="https://gateway.example/graphql",
        subscription_key="secret",
    ))
    monkeypatch.setattr(mcp_server, "schema_cache", SchemaCache(
        ttl_seconds=60, cache_file=tmp_path / "schema_cache.json",
    ))
    return state


class TestStructuredTools:
    """Tests for the resolver-backed query tools."""

    def test_returns_gateway_response(self, gateway) -> None:
        assert mcp_server.query_hscode_reference() == {"data": {"ok": True}}
        call = gateway["calls"][0]
        assert call["endpoint"] == "https://gateway.example/graphql"
        assert call["subscription_key"] == "secret"
        assert "uNION_REF_HSCODEs(first: 100)" in call["query"]

    def test_filter_and_order_by(self, gateway) -> None:
        mcp_server.query_country_area_reference(
            filter={"AREA_NM": {"eq": "亞洲"}}, order_by={"ROW": "ASC"}, fields=["ISO3"],
        )
        query = gateway["calls"][0]["query"]
        assert 'uNION_REF_COUNTRY_AREAs(first: 100, filter: { AREA_NM: { eq: "亞洲" } }, orderBy: { ROW: ASC })' in query

    def test_page_size_is_capped(self, gateway) -> None:
        mcp_server.query_trade_transactions(first=5000)
        assert "(first: 1000)" in gateway["calls"][0]["query"]

    def test_group_by_and_aggregations(self, gateway) -> None:
        mcp_server.query_trade_monthly_by_code(
            filter={"YEAR": {"eq": 2024}},
            group_by=["COUNTRY_ID"],
            aggregations=[{"field": "TRADE_VALUE_USD_AMT", "function": "sum"}],
        )
        query = gateway["calls"][0]["query"]
        assert "trade_monthly_by_code_countries(" in query
        assert "groupBy(fields: [COUNTRY_ID])" in query
        assert "sum(field: TRADE_VALUE_USD_AMT)" in query

    def test_gateway_error_becomes_error_dict(self, gateway) -> None:
        gateway["reply"] = GraphQLHTTPError(500, "boom")
        assert mcp_server.query_trade_transactions() == {
            "error": "Trade transaction query failed",
            "details": "GraphQL HTTP Error 500: boom",
        }

    def test_bad_filter_becomes_error_dict(self, gateway) -> None:
        result = mcp_server.query_hscode_reference(filter={"Industry_ID": {"gt": float("inf")}})
        assert result["error"] == "HS Code reference query failed"
        assert gateway["calls"] == []


class TestMonthlyByGroup:
    """Tests for the friendly-parameter monthly-by-group tool."""

    def test_friendly_parameters(self, gateway) -> None:
        mcp_server.query_trade_monthly_by_group(
            year=2024, trade_flow="export", country="US", order="DESC",
        )
        query = gateway["calls"][0]["query"]
        assert "trade_monthly_by_group_countries(first: 50, " in query
        assert 'filter: { YEAR: { eq: 2024 }, TRADE_FLOW: { eq: "出口" }, COUNTRY_ID: { eq: "US" } }' in query
        assert "orderBy: { PERIOD_MONTH: DESC }" in query

    def test_no_parameters(self, gateway) -> None:
        mcp_server.query_trade_monthly_by_group()
        query = gateway["calls"][0]["query"]
        assert "trade_monthly_by_group_countries(first: 50) {" in query

    def test_error(self, gateway) -> None:
        gateway["reply"] = GraphQLHTTPError(502, "bad gateway")
        result = mcp_server.query_trade_monthly_by_group(year=2024)
        assert result["error"] == "Trade monthly by group query failed"


class TestQueryGraphql:
    """Tests for the raw pass-through tool."""

    def test_passes_query_and_variables(self, gateway) -> None:
        mcp_server.query_graphql("query { a }", {"x": 1})
        assert gateway["calls"][0]["query"] == "query { a }"
        assert gateway["calls"][0]["variables"] == {"x": 1}

    def test_error(self, gateway) -> None:
        gateway["reply"] = GraphQLHTTPError(400, "syntax")
        assert mcp_server.query_graphql("query {")["error"] == "GraphQL query failed"


class TestIntrospectSchema:
    """Tests for the cached introspection tool."""

    def test_cache_round_trip(self, gateway) -> None:
        gateway["reply"] = {"data": {"__schema": {"types": []}}}
        first = mcp_server.introspect_schema()
        assert first["_source"] == "api"
        assert first["data"] == {"__schema": {"types": []}}

        second = mcp_server.introspect_schema()
        assert second["_source"] == "cache"
        assert second["data"] == {"__schema": {"types": []}}
        assert "_cache_age" in second
        assert len(gateway["calls"]) == 1

    def test_force_refresh(self, gateway) -> None:
        mcp_server.introspect_schema()
        assert mcp_server.introspect_schema(force_refresh=True)["_source"] == "api"
        assert len(gateway["calls"]) == 2

    def test_error_is_not_cached(self, gateway) -> None:
        gateway["reply"] = GraphQLHTTPError(500, "down")
        assert mcp_server.introspect_schema()["error"] == "Schema introspection failed"
        assert mcp_server.schema_cache.get() is None


class TestRegistration:
    """Tests for tool naming."""

    def test_list_resolvers(self) -> None:
        assert len(mcp_server.list_resolvers()["resolvers"]) == 5

    def test_camel_case(self) -> None:
        assert mcp_server.camel_case("query_trade_transactions") == "queryTradeTransactions"
        assert mcp_server.camel_case("list_resolvers") == "listResolvers"

    def test_tool_names(self) -> None:
        names = mcp_server.tool_names()
        assert len(names) == 8
        assert "query_trade_monthly_by_group" in names

    def test_aliases(self) -> None:
        names = mcp_server.tool_names(include_aliases=True)
        assert len(names) == 16
        assert "introspectSchema" in names
        assert "queryHscodeReference" in names
