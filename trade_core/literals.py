# =============================================================================
# trade_core/literals.py  —  Python values → GraphQL inline literals
# =============================================================================
#
# WHY INLINE LITERALS?
#   The API gateway forwards the client's query text but rejects
#   `query ($filter: ...)` variable definitions.  So every argument,
#   including deeply nested filter trees, has to be written straight into
#   the query as GraphQL source text.
#
# ENUMS:
#   GraphQL enum values are bare identifiers.  `orderBy: { YEAR: "ASC" }`
#   is a type error upstream; it must be `orderBy: { YEAR: ASC }`.  Strings
#   that exactly match a known enum value are emitted bare, everything else
#   is quoted.
#
# Rules (checked in this order):
#   None            → null
#   bool            → true / false   (before int: bool IS an int in Python)
#   int / float     → 2024, 3.5      (NaN / Infinity are rejected)
#   str             → ASC  or  "出口"
#   list / tuple    → [a, b]
#   mapping         → { KEY: value, ... }   (keys unquoted; must be GraphQL names)
# =============================================================================

import json
import math
import re
from collections.abc import Mapping

from trade_core.errors import InvalidLiteralError

# Ordering-direction enum values; the only strings written unquoted.
GRAPHQL_ENUM_VALUES = frozenset({"ASC", "DESC"})

# Keys are written unquoted, so they must be GraphQL names.
_GRAPHQL_NAME = re.compile(r"[_A-Za-z][_0-9A-Za-z]*")


def to_literal(value) -> str:
    """Serialize a JSON-like value as GraphQL inline-literal text.

    Args:
        value: None, bool, int, float, str, a list/tuple of those, or a
            mapping with string keys (nested arbitrarily deep).

    Returns:
        The literal text, e.g. ``{ YEAR: { eq: 2024 } }``.

    Raises:
        InvalidLiteralError: for NaN/Infinity, non-string or non-name mapping keys,
            cyclic containers, or any other type (sets, objects, callables).
    """
    return _serialize(value, frozenset())


def _serialize(value, active: frozenset) -> str:
    if value is None:
        return "null"

    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, int):
        return str(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidLiteralError(f"Cannot serialize non-finite number: {value!r}")
        return repr(value)

    if isinstance(value, str):
        if value in GRAPHQL_ENUM_VALUES:
            return value
        return json.dumps(value, ensure_ascii=False)

    # Containers: `active` holds the ids on the current path so a cycle is
    # caught instead of recursing forever.
    if isinstance(value, (list, tuple, Mapping)):
        if id(value) in active:
            raise InvalidLiteralError("Cannot serialize a cyclic structure")
        active = active | {id(value)}

        if isinstance(value, Mapping):
            entries = []
            for key, item in value.items():
                if not isinstance(key, str):
                    raise InvalidLiteralError(
                        f"Object keys must be strings, got {type(key).__name__}: {key!r}"
                    )
                if not _GRAPHQL_NAME.fullmatch(key):
                    raise InvalidLiteralError(f"Object key is not a valid GraphQL name: {key!r}")
                entries.append(f"{key}: {_serialize(item, active)}")
            return "{ " + ", ".join(entries) + " }"

        return "[" + ", ".join(_serialize(item, active) for item in value) + "]"

    raise InvalidLiteralError(
        f"Cannot serialize value of type {type(value).__name__} as a GraphQL literal"
    )
