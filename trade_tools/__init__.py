# =============================================================================
# trade_tools/__init__.py
# =============================================================================
# FastMCP tool wrappers: the translation layer between the agent and
# trade_core/.  Each tool clamps its page size, calls trade_core to build
# and execute a query, and returns a dict.  No query-building logic lives
# here.
#
# The tool docstrings are read by the LLM to decide WHEN and HOW to call a
# tool, so they carry field lists and worked filter examples.
# =============================================================================
