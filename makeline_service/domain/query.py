"""Query value objects for state store queries.

Filters, sorting and paging are immutable value objects that serialize to the
state store query JSON, for example::

    {"filter": {"AND": [{"EQ": {"orderId": "o1"}}, {"EQ": {"storeId": "s1"}}]},
     "sort": [{"key": "orderDate", "order": "DESC"}],
     "page": {"limit": 10}}

Stores without a server-side query engine evaluate the same objects locally
through ``Query.evaluate``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Literal

from .exceptions import InvalidQueryError

_MISSING = object()


def resolve_field(document: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted field path inside a JSON document.

    Returns a module-private sentinel when any segment is absent.
    """
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


class Filter(ABC):
    """A condition selecting stored documents."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize to the query JSON shape."""
        ...

    @abstractmethod
    def matches(self, document: Mapping[str, Any]) -> bool:
        """Evaluate the condition against a decoded document."""
        ...


@dataclass(frozen=True)
class EqFilter(Filter):
    """Equality on a single field."""

    field: str
    value: Any

    def __post_init__(self):
        if not self.field:
            raise InvalidQueryError("EQ filter requires a field name")

    def to_dict(self) -> dict[str, Any]:
        return {"EQ": {self.field: self.value}}

    def matches(self, document: Mapping[str, Any]) -> bool:
        return resolve_field(document, self.field) == self.value


@dataclass(frozen=True)
class InFilter(Filter):
    """Membership of a field's value in a set of values."""

    field: str
    values: tuple[Any, ...]

    def __post_init__(self):
        if not self.field:
            raise InvalidQueryError("IN filter requires a field name")
        if not self.values:
            raise InvalidQueryError(f"IN filter on '{self.field}' requires at least one value")

    def to_dict(self) -> dict[str, Any]:
        return {"IN": {self.field: list(self.values)}}

    def matches(self, document: Mapping[str, Any]) -> bool:
        value = resolve_field(document, self.field)
        return value is not _MISSING and value in self.values


@dataclass(frozen=True)
class _CompositeFilter(Filter):
    clauses: tuple[Filter, ...] = ()

    operator = ""

    def add_clause(self, clause: Filter) -> _CompositeFilter:
        """Return a new filter with ``clause`` appended."""
        return replace(self, clauses=(*self.clauses, clause))

    def validate(self) -> None:
        if len(self.clauses) < 2:
            raise InvalidQueryError(
                f"{self.operator} filter requires at least two clauses, got {len(self.clauses)}"
            )

    def to_dict(self) -> dict[str, Any]:
        self.validate()
        return {self.operator: [clause.to_dict() for clause in self.clauses]}


@dataclass(frozen=True)
class AndFilter(_CompositeFilter):
    """Conjunction: every clause must match."""

    operator = "AND"

    def matches(self, document: Mapping[str, Any]) -> bool:
        self.validate()
        return all(clause.matches(document) for clause in self.clauses)


@dataclass(frozen=True)
class OrFilter(_CompositeFilter):
    """Disjunction: at least one clause must match."""

    operator = "OR"

    def matches(self, document: Mapping[str, Any]) -> bool:
        self.validate()
        return any(clause.matches(document) for clause in self.clauses)


@dataclass(frozen=True)
class Sorting:
    """Sort order on one field."""

    key: str
    order: Literal["ASC", "DESC"] = "ASC"

    def __post_init__(self):
        if self.order not in ("ASC", "DESC"):
            raise InvalidQueryError(f"Invalid sort order: {self.order}")

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "order": self.order}


@dataclass(frozen=True)
class Pagination:
    """Page size plus the continuation token returned by the previous page."""

    limit: int
    token: str | None = None

    def __post_init__(self):
        if self.limit < 1:
            raise InvalidQueryError(f"Page limit must be positive, got {self.limit}")

    def to_dict(self) -> dict[str, Any]:
        page: dict[str, Any] = {"limit": self.limit}
        if self.token:
            page["token"] = self.token
        return page


@dataclass(frozen=True)
class Query:
    """A state store query: optional filter, sort keys and page."""

    filter: Filter | None = None
    sort: tuple[Sorting, ...] = field(default_factory=tuple)
    page: Pagination | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the state store query JSON."""
        body: dict[str, Any] = {}
        if self.filter is not None:
            body["filter"] = self.filter.to_dict()
        if self.sort:
            body["sort"] = [sorting.to_dict() for sorting in self.sort]
        if self.page is not None:
            body["page"] = self.page.to_dict()
        return body

    def with_token(self, token: str) -> Query:
        """Return the query for the page following ``token``."""
        if self.page is None:
            raise InvalidQueryError("Cannot continue a query without a page limit")
        return replace(self, page=replace(self.page, token=token))

    def evaluate(
        self, documents: Iterable[tuple[str, Mapping[str, Any]]]
    ) -> tuple[list[tuple[str, Mapping[str, Any]]], str | None]:
        """Apply filter, sort and page to ``(key, document)`` pairs.

        Returns the selected pairs and the continuation token for the next
        page, or ``None`` when there is no further page. Tokens are offsets
        into the sorted result.
        """
        rows = [
            (key, document)
            for key, document in documents
            if self.filter is None or self.filter.matches(document)
        ]

        for sorting in reversed(self.sort):
            present = [row for row in rows if resolve_field(row[1], sorting.key) is not _MISSING]
            missing = [row for row in rows if resolve_field(row[1], sorting.key) is _MISSING]
            try:
                present.sort(
                    key=lambda row, k=sorting.key: resolve_field(row[1], k),
                    reverse=sorting.order == "DESC",
                )
            except TypeError as e:
                raise InvalidQueryError(
                    f"Cannot sort on '{sorting.key}': values are not comparable"
                ) from e
            rows = present + missing

        if self.page is None:
            return rows, None

        try:
            offset = int(self.page.token) if self.page.token else 0
        except ValueError as e:
            raise InvalidQueryError(f"Invalid page token: {self.page.token}") from e
        if offset < 0:
            raise InvalidQueryError(f"Invalid page token: {self.page.token}")

        end = offset + self.page.limit
        next_token = str(end) if end < len(rows) else None
        return rows[offset:end], next_token


def eq(field_name: str, value: Any) -> EqFilter:
    """Shorthand for an equality filter."""
    return EqFilter(field_name, value)


def all_of(*clauses: Filter) -> AndFilter:
    """Shorthand for a conjunction of filters."""
    return AndFilter(tuple(clauses))
