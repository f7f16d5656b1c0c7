# =============================================================================
# trade_core/config.py  —  Settings from the environment
# =============================================================================
#
# All settings come from environment variables.  The process entry points
# (main.py and trade_tools/mcp_server.py) call load_dotenv() first, so a
# local .env file works the same as real environment variables.
#
# REQUIRED:
#   APIM_GRAPHQL_ENDPOINT   the gateway's GraphQL URL
#   APIM_SUBSCRIPTION_KEY   sent as Ocp-Apim-Subscription-Key
#
# OPTIONAL (defaults in parentheses):
#   MCP_TRANSPORT (stdio)  MCP_HOST (127.0.0.1)  MCP_PORT / PORT (3000)
#   SCHEMA_CACHE_TTL_SECONDS (86400)  SCHEMA_CACHE_FILE (cache/schema_cache.json)
#   DEFAULT_PAGE_SIZE (100)  MAX_PAGE_SIZE (1000)
#   LOG_LEVEL (INFO)
#
# MAX_PAGE_SIZE exists because the gateway returns 500 when a page of
# all-fields rows gets too big (2000+ items).
# =============================================================================

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from trade_core.errors import ConfigurationError


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the trade GraphQL MCP server."""

    graphql_endpoint: str = ""
    subscription_key: str = ""
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 3000
    schema_cache_ttl_seconds: int = 24 * 60 * 60
    schema_cache_file: str = "cache/schema_cache.json"
    default_page_size: int = 100
    max_page_size: int = 1000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read settings from `env` (defaults to os.environ)."""
        env = os.environ if env is None else env
        port_default = _int_env(env, "PORT", 3000)
        return cls(
            graphql_endpoint=env.get("APIM_GRAPHQL_ENDPOINT", ""),
            subscription_key=env.get("APIM_SUBSCRIPTION_KEY", ""),
            transport=env.get("MCP_TRANSPORT", "stdio"),
            host=env.get("MCP_HOST", "127.0.0.1"),
            port=_int_env(env, "MCP_PORT", port_default),
            schema_cache_ttl_seconds=_int_env(env, "SCHEMA_CACHE_TTL_SECONDS", 24 * 60 * 60),
            schema_cache_file=env.get("SCHEMA_CACHE_FILE") or "cache/schema_cache.json",
            default_page_size=_int_env(env, "DEFAULT_PAGE_SIZE", 100),
            max_page_size=_int_env(env, "MAX_PAGE_SIZE", 1000),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> None:
        """Raise ConfigurationError if a required setting is missing."""
        missing = []
        if not self.graphql_endpoint:
            missing.append("APIM_GRAPHQL_ENDPOINT")
        if not self.subscription_key:
            missing.append("APIM_SUBSCRIPTION_KEY")
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Set them in a .env file or in the host's application settings."
            )

    def clamp_page_size(self, first: Optional[int], default: Optional[int] = None) -> int:
        """Apply the default page size, then cap it at max_page_size."""
        if not first:
            first = self.default_page_size if default is None else default
        return min(first, self.max_page_size)
