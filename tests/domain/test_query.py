"""Tests for state store query value objects."""

import pytest

from makeline_service.domain.exceptions import InvalidQueryError
from makeline_service.domain.query import (
    AndFilter,
    EqFilter,
    InFilter,
    OrFilter,
    Pagination,
    Query,
    Sorting,
    all_of,
    eq,
    resolve_field,
)

DOCUMENTS = [
    ("o1", {"orderId": "o1", "storeId": "s1", "orderTotal": 10, "customer": {"tier": "gold"}}),
    ("o2", {"orderId": "o2", "storeId": "s1", "orderTotal": 30}),
    ("o3", {"orderId": "o3", "storeId": "s2", "orderTotal": 20, "customer": {"tier": "silver"}}),
]


class TestFilterSerialization:
    """Filters serialize to the state store query JSON."""

    def test_eq_filter(self):
        assert EqFilter("storeId", "s1").to_dict() == {"EQ": {"storeId": "s1"}}

    def test_and_filter(self):
        query_filter = AndFilter().add_clause(eq("orderId", "o1")).add_clause(eq("storeId", "s1"))

        assert query_filter.to_dict() == {
            "AND": [{"EQ": {"orderId": "o1"}}, {"EQ": {"storeId": "s1"}}]
        }

    def test_or_and_in_filters(self):
        query_filter = OrFilter((eq("storeId", "s1"), InFilter("orderId", ("o3", "o4"))))

        assert query_filter.to_dict() == {
            "OR": [{"EQ": {"storeId": "s1"}}, {"IN": {"orderId": ["o3", "o4"]}}]
        }

    def test_and_filter_with_one_clause_is_invalid(self):
        with pytest.raises(InvalidQueryError, match="at least two clauses"):
            AndFilter((eq("orderId", "o1"),)).to_dict()

    def test_eq_filter_requires_field(self):
        with pytest.raises(InvalidQueryError):
            EqFilter("", "value")

    def test_in_filter_requires_values(self):
        with pytest.raises(InvalidQueryError):
            InFilter("orderId", ())

    def test_add_clause_does_not_mutate(self):
        base = AndFilter((eq("a", 1),))

        extended = base.add_clause(eq("b", 2))

        assert len(base.clauses) == 1
        assert len(extended.clauses) == 2
        assert isinstance(extended, AndFilter)


class TestQuerySerialization:
    def test_full_query(self):
        query = Query(
            filter=all_of(eq("orderId", "o1"), eq("storeId", "s1")),
            sort=(Sorting("orderDate", "DESC"),),
            page=Pagination(limit=10, token="20"),
        )

        assert query.to_dict() == {
            "filter": {"AND": [{"EQ": {"orderId": "o1"}}, {"EQ": {"storeId": "s1"}}]},
            "sort": [{"key": "orderDate", "order": "DESC"}],
            "page": {"limit": 10, "token": "20"},
        }

    def test_empty_query(self):
        assert Query().to_dict() == {}

    def test_with_token_requires_page(self):
        with pytest.raises(InvalidQueryError):
            Query(filter=eq("storeId", "s1")).with_token("2")

    def test_with_token(self):
        query = Query(page=Pagination(limit=2)).with_token("2")

        assert query.page == Pagination(limit=2, token="2")

    def test_invalid_sort_order(self):
        with pytest.raises(InvalidQueryError):
            Sorting("orderDate", "UP")

    def test_invalid_page_limit(self):
        with pytest.raises(InvalidQueryError):
            Pagination(limit=0)


class TestQueryEvaluation:
    """Local evaluation used by stores without a query engine."""

    def test_resolve_nested_field(self):
        assert resolve_field(DOCUMENTS[0][1], "customer.tier") == "gold"
        assert not EqFilter("customer.tier", None).matches(DOCUMENTS[1][1])

    def test_eq_filter(self):
        rows, token = Query(filter=eq("storeId", "s1")).evaluate(DOCUMENTS)

        assert [key for key, _ in rows] == ["o1", "o2"]
        assert token is None

    def test_conjunction(self):
        rows, _ = Query(filter=all_of(eq("orderId", "o2"), eq("storeId", "s1"))).evaluate(
            DOCUMENTS
        )

        assert [key for key, _ in rows] == ["o2"]

    def test_conjunction_without_match(self):
        rows, _ = Query(filter=all_of(eq("orderId", "o3"), eq("storeId", "s1"))).evaluate(
            DOCUMENTS
        )

        assert rows == []

    def test_nested_eq_filter(self):
        rows, _ = Query(filter=eq("customer.tier", "silver")).evaluate(DOCUMENTS)

        assert [key for key, _ in rows] == ["o3"]

    def test_or_and_in(self):
        rows, _ = Query(
            filter=OrFilter((eq("storeId", "s2"), InFilter("orderId", ("o1",))))
        ).evaluate(DOCUMENTS)

        assert [key for key, _ in rows] == ["o1", "o3"]

    def test_sort_descending(self):
        rows, _ = Query(sort=(Sorting("orderTotal", "DESC"),)).evaluate(DOCUMENTS)

        assert [key for key, _ in rows] == ["o2", "o3", "o1"]

    def test_sort_puts_missing_values_last(self):
        rows, _ = Query(sort=(Sorting("customer.tier"),)).evaluate(DOCUMENTS)

        assert [key for key, _ in rows] == ["o1", "o3", "o2"]

    def test_sort_on_mixed_types_is_invalid(self):
        documents = [("a", {"v": 1}), ("b", {"v": "x"})]

        with pytest.raises(InvalidQueryError, match="not comparable"):
            Query(sort=(Sorting("v"),)).evaluate(documents)

    def test_paging(self):
        query = Query(sort=(Sorting("orderTotal"),), page=Pagination(limit=2))

        first, token = query.evaluate(DOCUMENTS)
        second, last_token = query.with_token(token).evaluate(DOCUMENTS)

        assert [key for key, _ in first] == ["o1", "o3"]
        assert token == "2"
        assert [key for key, _ in second] == ["o2"]
        assert last_token is None

    def test_invalid_page_token(self):
        query = Query(page=Pagination(limit=2, token="abc"))

        with pytest.raises(InvalidQueryError, match="Invalid page token"):
            query.evaluate(DOCUMENTS)
