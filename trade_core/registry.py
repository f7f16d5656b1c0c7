# =============================================================================
# trade_core/registry.py  —  Resolver Registry (static upstream metadata)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Maps a logical resolver key to the metadata the query builder needs:
#   the GraphQL query-field name, the selectable fields (in order), and the
#   fields that may be aggregated.
#
# THE FIVE RESOLVERS:
#   UNION_REF_HSCODE               HS Code reference data (small, fast)
#   trade_monthly_by_code_country  monthly trade stats per HS Code × country
#   trade_monthly_by_group_country monthly trade stats per industry × country
#   UNION_REF_COUNTRY_AREA         country / area lookup (small, fast)
#   TXN_MOF_NON_PROTECT_MT         raw transactions (large, slow)
#
# ADDING A RESOLVER:
#   Add one ResolverDescriptor below.  Keep it in sync with the upstream
#   schema by hand; nothing here introspects the live API.
#
# The mapping is wrapped in MappingProxyType so it cannot be written to.
# =============================================================================

from types import MappingProxyType

from trade_core.errors import UnknownResolverError
from trade_core.models import ResolverDescriptor

_RESOLVERS = {
    "UNION_REF_HSCODE": ResolverDescriptor(
        query_name="uNION_REF_HSCODEs",
        fields=(
            "Report_ID", "Industry_ID", "Industry", "HS_Code_Group",
            "HS_Code", "HS_Code_ZH", "Unit_Name", "Unit",
        ),
        numeric_fields=("Industry_ID",),
        scalar_fields_enum="UNION_REF_HSCODEScalarFields",
        numeric_aggregate_enum="UNION_REF_HSCODENumericAggregateFields",
        filter_input_type="UNION_REF_HSCODEFilterInput",
        order_by_input_type="UNION_REF_HSCODEOrderByInput",
        description="HS Code reference table: industry classification, HS Code mapping, Chinese product names",
    ),
    "trade_monthly_by_code_country": ResolverDescriptor(
        query_name="trade_monthly_by_code_countries",
        fields=(
            "PERIOD_MONTH", "YEAR", "MONTH", "TRADE_FLOW", "HS_CODE",
            "HS_CODE_ZH", "COUNTRY_ID", "COUNTRY_COMM_ZH",
            "TRADE_VALUE_USD_AMT", "TRADE_VALUE_TWD_AMT", "TRADE_WEIGHT",
            "TRADE_QUANT", "UNIT_PRICE_USD_PER_KG", "ETL_DT",
        ),
        numeric_fields=(
            "YEAR", "MONTH", "TRADE_VALUE_USD_AMT", "TRADE_VALUE_TWD_AMT",
            "TRADE_WEIGHT", "TRADE_QUANT", "UNIT_PRICE_USD_PER_KG",
        ),
        scalar_fields_enum="trade_monthly_by_code_countryScalarFields",
        numeric_aggregate_enum="trade_monthly_by_code_countryNumericAggregateFields",
        filter_input_type="trade_monthly_by_code_countryFilterInput",
        order_by_input_type="trade_monthly_by_code_countryOrderByInput",
        description="Monthly trade statistics per HS Code and country",
    ),
    "trade_monthly_by_group_country": ResolverDescriptor(
        query_name="trade_monthly_by_group_countries",
        fields=(
            "PERIOD_MONTH", "YEAR", "MONTH", "TRADE_FLOW", "INDUSTRY_ID",
            "INDUSTRY", "HS_CODE_GROUP", "COUNTRY_ID", "COUNTRY_COMM_ZH",
            "AREA_ID", "AREA_NM", "TRADE_VALUE_USD_AMT", "TRADE_VALUE_TWD_AMT",
            "TRADE_WEIGHT", "TRADE_QUANT", "UNIT_PRICE_USD_PER_KG", "ETL_DT",
        ),
        numeric_fields=(
            "YEAR", "MONTH", "INDUSTRY_ID", "TRADE_VALUE_USD_AMT",
            "TRADE_VALUE_TWD_AMT", "TRADE_WEIGHT", "TRADE_QUANT",
            "UNIT_PRICE_USD_PER_KG",
        ),
        scalar_fields_enum="trade_monthly_by_group_countryScalarFields",
        numeric_aggregate_enum="trade_monthly_by_group_countryNumericAggregateFields",
        filter_input_type="trade_monthly_by_group_countryFilterInput",
        order_by_input_type="trade_monthly_by_group_countryOrderByInput",
        description="Monthly trade statistics per industry group and country, with area",
    ),
    "UNION_REF_COUNTRY_AREA": ResolverDescriptor(
        query_name="uNION_REF_COUNTRY_AREAs",
        fields=(
            "ISO3", "COUNTRY_COMM_ZH", "COUNTRY_COMM_EN", "AREA_ID",
            "AREA_NM", "ROW", "AREA_sort",
        ),
        numeric_fields=("ROW", "AREA_sort"),
        scalar_fields_enum="UNION_REF_COUNTRY_AREAScalarFields",
        numeric_aggregate_enum="UNION_REF_COUNTRY_AREANumericAggregateFields",
        filter_input_type="UNION_REF_COUNTRY_AREAFilterInput",
        order_by_input_type="UNION_REF_COUNTRY_AREAOrderByInput",
        description="Country / area reference table: ISO3 codes, Chinese and English names, area",
    ),
    "TXN_MOF_NON_PROTECT_MT": ResolverDescriptor(
        query_name="tXN_MOF_NON_PROTECT_MTs",
        fields=(
            "TXN_DT", "HS_CODE", "HS_CODE_ZH", "HS_CODE_EN", "COUNTRY_ID",
            "COUNTRY_ZH", "COUNTRY_EN", "COUNTRY_COMM_ZH", "COUNTRY_COMM_EN",
            "TRADE_FLOW", "TRADE_VALUE_TWD_AMT", "TRADE_QUANT",
            "TRADE_WEIGHT_ORG", "TRADE_WEIGHT", "RATE_VALUE",
            "TRADE_VALUE_USD_AMT", "ETL_DT",
        ),
        numeric_fields=(
            "TRADE_VALUE_TWD_AMT", "TRADE_QUANT", "TRADE_WEIGHT_ORG",
            "TRADE_WEIGHT", "RATE_VALUE", "TRADE_VALUE_USD_AMT",
        ),
        scalar_fields_enum="TXN_MOF_NON_PROTECT_MTScalarFields",
        numeric_aggregate_enum="TXN_MOF_NON_PROTECT_MTNumericAggregateFields",
        filter_input_type="TXN_MOF_NON_PROTECT_MTFilterInput",
        order_by_input_type="TXN_MOF_NON_PROTECT_MTOrderByInput",
        description="Full transaction detail table (large; queries are slow)",
    ),
}

RESOLVER_REGISTRY = MappingProxyType(_RESOLVERS)


def resolver_keys() -> list[str]:
    """Return every registered resolver key, in registration order."""
    return list(RESOLVER_REGISTRY)


def lookup(key: str) -> ResolverDescriptor:
    """Return the descriptor for `key`.

    Raises:
        UnknownResolverError: naming the key and listing the known keys.
    """
    try:
        return RESOLVER_REGISTRY[key]
    except (KeyError, TypeError):
        raise UnknownResolverError(key, resolver_keys()) from None


def describe_resolvers() -> list[dict]:
    """Plain-dict summary of every resolver (safe to return from a tool)."""
    return [
        {
            "key": key,
            "query_name": descriptor.query_name,
            "fields": list(descriptor.fields),
            "numeric_fields": list(descriptor.numeric_fields),
            "description": descriptor.description,
        }
        for key, descriptor in RESOLVER_REGISTRY.items()
    ]
