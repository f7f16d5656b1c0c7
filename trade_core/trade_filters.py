# =============================================================================
# trade_core/trade_filters.py  —  Friendly parameters → filter trees
# =============================================================================
#
# LLMs are bad at writing nested GraphQL filter objects by hand and good at
# filling in "year=2024, country=US".  The monthly-by-group tool therefore
# takes a handful of plain parameters and this module builds the filter.
#
# COUNTRY HEURISTIC:
#   "US", "jp"          → two letters    → COUNTRY_ID (ISO2, upper-cased)
#   "EUROPE", "asean"   → letters / _    → AREA_ID    (upper-cased)
#   "美國", "東南亞"     → anything else  → COUNTRY_COMM_ZH or AREA_NM
# =============================================================================

import re
from typing import Optional

EXPORT = "出口"
IMPORT = "進口"

_TRADE_FLOW_ALIASES = {
    EXPORT: EXPORT, "export": EXPORT, "1": EXPORT,
    IMPORT: IMPORT, "import": IMPORT, "2": IMPORT,
}

_ISO2 = re.compile(r"^[A-Za-z]{2}$")
_AREA_CODE = re.compile(r"^[A-Za-z_]+$")


def normalize_trade_flow(value) -> str:
    """Map export/import spellings ("export", "1", "出口"...) to the stored text."""
    raw = str(value).strip()
    return _TRADE_FLOW_ALIASES.get(raw.lower(), raw)


def country_filter(country: str) -> dict:
    """Filter fragment for a country code, area code, or Chinese name."""
    value = country.strip()
    if _ISO2.match(value):
        return {"COUNTRY_ID": {"eq": value.upper()}}
    if _AREA_CODE.match(value):
        return {"AREA_ID": {"eq": value.upper()}}
    # Chinese text could be a country or an area name; try both.
    return {"or": [{"COUNTRY_COMM_ZH": {"eq": value}}, {"AREA_NM": {"eq": value}}]}


def build_monthly_by_group_filter(
    year: Optional[int] = None,
    trade_flow: Optional[str] = None,
    industry_keyword: Optional[str] = None,
    country: Optional[str] = None,
) -> Optional[dict]:
    """Build the trade_monthly_by_group_country filter, or None if empty."""
    filter_ = {}
    if year:
        filter_["YEAR"] = {"eq": year}
    if trade_flow:
        filter_["TRADE_FLOW"] = {"eq": normalize_trade_flow(trade_flow)}
    if industry_keyword:
        filter_["INDUSTRY"] = {"contains": industry_keyword}
    if country and country.strip():
        filter_.update(country_filter(country))
    return filter_ or None
