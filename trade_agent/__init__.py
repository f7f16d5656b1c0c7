# =============================================================================
# trade_agent/__init__.py
# =============================================================================
# Google ADK agent configuration.  The agent decides which trade tools to
# call and interprets their results; it holds no query logic itself.
# =============================================================================
