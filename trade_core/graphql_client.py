# =============================================================================
# trade_core/graphql_client.py  —  POST a query to the GraphQL gateway
# =============================================================================
#
# The gateway authenticates with a product subscription key sent in the
# Ocp-Apim-Subscription-Key header.  Every request goes through
# execute_graphql() so that header handling and error mapping live in one
# place.
#
# ERROR MAPPING:
#   non-2xx status            → GraphQLHTTPError (status + body text)
#   no HTTP answer at all     → GraphQLTransportError
#   200 with "errors": [...]  → GraphQLResponseError ("; "-joined messages)
#
# Nothing is retried here; the caller decides what a failure means.
# =============================================================================

import json
import logging
import urllib.error
import urllib.request
from typing import Optional

from trade_core.errors import (
    GraphQLHTTPError,
    GraphQLResponseError,
    GraphQLTransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30


def build_headers(subscription_key: str) -> dict[str, str]:
    """Standard headers for a gateway GraphQL request."""
    return {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Ocp-Apim-Subscription-Key": subscription_key,
    }


def execute_graphql(
    query: str,
    endpoint: str,
    subscription_key: str,
    variables: Optional[dict] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict:
    """Execute a GraphQL query and return the decoded response.

    Args:
        query: GraphQL query text.
        endpoint: The gateway GraphQL URL.
        subscription_key: Gateway subscription key.
        variables: Optional variables object (sent as {} when omitted).
        timeout: Socket timeout in seconds.

    Returns:
        The full response body, e.g. {"data": {...}}.

    Raises:
        GraphQLHTTPError, GraphQLTransportError, GraphQLResponseError
    """
    payload = json.dumps({"query": query, "variables": variables or {}}).encode("utf-8")
    req = urllib.request.Request(
        endpoint,
        data=payload,
        headers=build_headers(subscription_key),
        method="POST",
    )

    logger.debug("POST %s (%d bytes)", endpoint, len(payload))

    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            raw = response.read().decode("utf-8")
    except urllib.error.HTTPError as e:
        body = e.read().decode("utf-8", errors="replace") if e.fp else ""
        raise GraphQLHTTPError(e.code, body) from e
    except (urllib.error.URLError, OSError) as e:
        raise GraphQLTransportError(f"GraphQL request to {endpoint} failed: {e}") from e

    try:
        result = json.loads(raw)
    except ValueError as e:
        raise GraphQLTransportError(f"Gateway returned invalid JSON: {raw[:200]!r}") from e

    errors = result.get("errors") if isinstance(result, dict) else None
    if errors:
        raise GraphQLResponseError(errors)

    return result
