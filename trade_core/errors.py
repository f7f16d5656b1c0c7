# =============================================================================
# trade_core/errors.py  —  Exception hierarchy for the trade query core
# =============================================================================
#
# Everything raised from trade_core/ derives from TradeQueryError, so the
# tool layer can catch ONE type and turn it into an {"error", "details"}
# dict for the agent.  Anything that is not a TradeQueryError is a bug and
# is left to propagate.
#
# WHAT IS *NOT* AN ERROR:
#   Unknown field names, unknown group-by columns and non-numeric
#   aggregation targets are silently normalized by the query builder.
#   Only a bad resolver key or an unserializable value stops a query.
# =============================================================================


class TradeQueryError(Exception):
    """Base class for every error raised by trade_core."""


class UnknownResolverError(TradeQueryError):
    """The resolver key is not in the registry."""

    def __init__(self, key: str, available: list[str]):
        self.key = key
        self.available = list(available)
        super().__init__(
            f"Unknown resolver: {key}. "
            f"Available resolvers: {', '.join(self.available)}"
        )


class InvalidLiteralError(TradeQueryError):
    """A value cannot be written as a GraphQL inline literal."""


class ConfigurationError(TradeQueryError):
    """Required settings are missing or malformed."""


# -----------------------------------------------------------------------------
# GraphQL transport errors
# -----------------------------------------------------------------------------
class GraphQLClientError(TradeQueryError):
    """Base class for failures talking to the upstream GraphQL gateway."""


class GraphQLHTTPError(GraphQLClientError):
    """The gateway answered with a non-2xx status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"GraphQL HTTP Error {status}: {body}")


class GraphQLTransportError(GraphQLClientError):
    """The request never got an HTTP answer (DNS, refused, timeout...)."""


class GraphQLResponseError(GraphQLClientError):
    """The gateway answered 200 but the payload carries GraphQL errors."""

    def __init__(self, errors: list):
        self.errors = list(errors)
        messages = "; ".join(
            str(e.get("message", e)) if isinstance(e, dict) else str(e)
            for e in self.errors
        )
        super().__init__(f"GraphQL Error: {messages}")
