"""OData system query options.

A :class:`QueryClause` is one ``$option=value`` pair. The value is kept
unencoded and percent-encoded only when the clause is serialized, so the
same clause can be inspected, compared and rendered.

Example:
    ```python
    from odata_simple_client.query import QueryClause, QueryOption

    clause = QueryClause(QueryOption.FILTER, "titel eq 'Lov om skat'")
    clause.to_query()  # "$filter=titel%20eq%20%27Lov%20om%20skat%27"
    ```
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote, unquote

from odata_simple_client.errors.exceptions import ConstructionError


class QueryOption(str, Enum):
    """System query options understood by OData 3.0 services."""

    FILTER = "filter"
    EXPAND = "expand"
    SELECT = "select"
    ORDER_BY = "orderby"
    TOP = "top"
    SKIP = "skip"
    FORMAT = "format"
    INLINE_COUNT = "inlinecount"

    @property
    def token(self) -> str:
        """The query-string key, e.g. ``$filter``."""
        return f"${self.value}"


class Comparison(str, Enum):
    """Comparison operators for ``$filter`` expressions (OData 3.0 URL conventions, 5.1.2)."""

    EQUAL = "eq"
    NOT_EQUAL = "ne"
    GREATER_THAN = "gt"
    GREATER_OR_EQUAL = "ge"
    LESS_THAN = "lt"
    LESS_OR_EQUAL = "le"


class Direction(str, Enum):
    """Sort direction for ``$orderby``."""

    ASCENDING = "asc"
    DESCENDING = "desc"


class Format(str, Enum):
    """Payload format requested with ``$format``."""

    JSON = "json"
    XML = "xml"


class InlineCount(str, Enum):
    """Whether the service includes a total count in each page."""

    NONE = "none"
    ALL_PAGES = "allpages"


# Options whose value is a comma-separated list of property paths.
LIST_OPTIONS = frozenset({QueryOption.EXPAND, QueryOption.SELECT})


def encode_value(value: str, safe: str = "") -> str:
    """Percent-encode a query value. Space becomes ``%20``."""
    return quote(value, safe=safe)


def decode_value(value: str) -> str:
    """Reverse :func:`encode_value`."""
    return unquote(value)


def escape_literal(value: str) -> str:
    """Escape a string for use inside a single-quoted OData literal.

    >>> escape_literal("O'Brien")
    "O''Brien"
    """
    return value.replace("'", "''")


def format_literal(value: Any) -> str:
    """Render a Python value as an OData literal.

    Strings are single-quoted with apostrophes doubled, booleans become
    ``true``/``false``, ``None`` becomes ``null`` and floats use the
    ``Double`` form with an upper-case exponent.

    Raises:
        ConstructionError: If the value has no OData literal form.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ConstructionError(f"Cannot render {value} as an OData literal")
        # Double literals use an upper-case exponent marker: 1E+20
        return repr(value).replace("e", "E")
    if isinstance(value, str):
        return f"'{escape_literal(value)}'"
    raise ConstructionError(f"Cannot render {type(value).__name__} as an OData literal")


@dataclass(frozen=True)
class QueryClause:
    """A single system query option and its unencoded value."""

    option: QueryOption
    value: str

    def to_query(self) -> str:
        """Serialize as ``$option=<percent-encoded value>``."""
        safe = "," if self.option in LIST_OPTIONS else ""
        return f"{self.option.token}={encode_value(self.value, safe=safe)}"


def to_query_string(clauses: "list[QueryClause] | tuple[QueryClause, ...]") -> str:
    """Join clauses with ``&`` in the order given. Duplicates are kept."""
    return "&".join(clause.to_query() for clause in clauses)
