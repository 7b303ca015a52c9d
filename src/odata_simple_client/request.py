"""Request shapes: list an entity set or get one entity by key.

Requests are transient values built by the caller and handed to a
:class:`~odata_simple_client.datasource.DataSource`. Builder methods
return ``self`` so calls can be chained.

Example:
    ```python
    from odata_simple_client import Comparison, Direction, GetRequest, ListRequest

    latest = (
        ListRequest("Dokument")
        .filter("typeid", Comparison.EQUAL, "5")
        .order_by("opdateringsdato", Direction.DESCENDING)
        .top(20)
    )

    single = GetRequest("Dokument", 24).expand("DokumentAktør")
    ```
"""

import unicodedata
from abc import ABC, abstractmethod
from typing import Any, Self

from odata_simple_client.errors.exceptions import ConstructionError
from odata_simple_client.query import (
    Comparison,
    Direction,
    Format,
    InlineCount,
    QueryClause,
    QueryOption,
    encode_value,
    escape_literal,
    format_literal,
)

# Characters that would change the meaning of the resource path.
_RESERVED_IN_ENTITY_SET = frozenset("/?#()")


def _validate_entity_set(entity_set: str) -> str:
    if not isinstance(entity_set, str) or not entity_set.strip():
        raise ConstructionError("Entity set name must be a non-empty string")
    if entity_set != entity_set.strip():
        raise ConstructionError(f"Entity set name has surrounding whitespace: {entity_set!r}")
    reserved = _RESERVED_IN_ENTITY_SET.intersection(entity_set)
    if reserved:
        raise ConstructionError(f"Entity set name {entity_set!r} contains reserved characters: {sorted(reserved)}")
    return entity_set


def format_key(key: int | str) -> str:
    """Render an entity key as an OData key literal.

    Integers render as their decimal form, strings are single-quoted with
    apostrophes doubled.

    Raises:
        ConstructionError: If the key is neither an integer nor a string,
            or is a string containing control characters or lone surrogates.
    """
    # bool is an int subclass but has no key literal
    if isinstance(key, bool):
        raise ConstructionError("Boolean values cannot be used as entity keys")
    if isinstance(key, int):
        return str(key)
    if isinstance(key, str):
        for ch in key:
            if unicodedata.category(ch) in ("Cc", "Cs"):
                raise ConstructionError(f"Entity key {key!r} contains a character that cannot be escaped: {ch!r}")
        return f"'{escape_literal(key)}'"
    raise ConstructionError(f"Entity key must be int or str, got {type(key).__name__}")


def _validate_count(name: str, count: int) -> str:
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise ConstructionError(f"${name} must be a non-negative integer, got {count!r}")
    return str(count)


def _join_fields(fields: tuple[str, ...]) -> str:
    cleaned = [field.strip() for field in fields if field and field.strip()]
    if not cleaned:
        raise ConstructionError("At least one non-empty field name is required")
    return ",".join(cleaned)


class Request(ABC):
    """Common surface of list and get requests."""

    def __init__(self, entity_set: str) -> None:
        self.entity_set = _validate_entity_set(entity_set)
        self._clauses: list[QueryClause] = []

    @abstractmethod
    def resource_path(self) -> str:
        """Path relative to the service root, always starting with ``/``."""

    def clauses(self) -> list[QueryClause]:
        """Query clauses in the order they were added."""
        return list(self._clauses)

    def _add(self, option: QueryOption, value: str) -> None:
        self._clauses.append(QueryClause(option, value))

    def expand(self, *fields: str) -> Self:
        """Expand navigation properties inline.

        For the Folketinget API, expanding ``DokumentAktør`` on a ``Dokument``
        returns the document authors in the same response.
        """
        self._add(QueryOption.EXPAND, _join_fields(fields))
        return self

    def select(self, *fields: str) -> Self:
        """Only return the given properties."""
        self._add(QueryOption.SELECT, _join_fields(fields))
        return self

    def format(self, format: Format) -> Self:
        """Request a payload format via ``$format``."""
        self._add(QueryOption.FORMAT, Format(format).value)
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.resource_path()!r}, clauses={self._clauses!r})"


class ListRequest(Request):
    """Request zero or more entities of an entity set."""

    def resource_path(self) -> str:
        return "/" + encode_value(self.entity_set)

    def filter(self, field_or_expression: str, comparison: Comparison | None = None, value: Any = None) -> Self:
        """Filter results with an OData boolean expression.

        Either pass a complete expression, ``filter("id eq 24")``, or a
        field, comparison and value, ``filter("id", Comparison.EQUAL, 24)``.
        String values are inserted verbatim; quote them with
        :func:`~odata_simple_client.query.format_literal` when they are
        string literals. The expression syntax itself is not validated.
        """
        if comparison is None:
            if not field_or_expression:
                raise ConstructionError("Filter expression must not be empty")
            expression = field_or_expression
        else:
            rendered = value if isinstance(value, str) else format_literal(value)
            expression = f"{field_or_expression} {Comparison(comparison).value} {rendered}"
        self._add(QueryOption.FILTER, expression)
        return self

    def order_by(self, field: str, direction: Direction = Direction.ASCENDING) -> Self:
        """Order results by ``field``, ascending unless told otherwise."""
        if not field:
            raise ConstructionError("Order-by field must not be empty")
        self._add(QueryOption.ORDER_BY, f"{field} {Direction(direction).value}")
        return self

    def top(self, count: int) -> Self:
        """Only retrieve the first ``count`` items."""
        self._add(QueryOption.TOP, _validate_count("top", count))
        return self

    def skip(self, count: int) -> Self:
        """Skip the first ``count`` items."""
        self._add(QueryOption.SKIP, _validate_count("skip", count))
        return self

    def inline_count(self, value: InlineCount) -> Self:
        """Ask the service to report the total count alongside each page."""
        self._add(QueryOption.INLINE_COUNT, InlineCount(value).value)
        return self


class GetRequest(Request):
    """Request a single entity by key.

    Only ``$expand``, ``$select`` and ``$format`` may be attached; none of
    them changes which entity is returned.
    """

    def __init__(self, entity_set: str, key: int | str) -> None:
        super().__init__(entity_set)
        self.key = key
        self._key_literal = format_key(key)

    def resource_path(self) -> str:
        # quotes and apostrophes stay literal, everything else is escaped
        key = encode_value(self._key_literal, safe="'")
        return f"/{encode_value(self.entity_set)}({key})"
