"""
Unit tests for query expression and sort serialization.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
import pytest

from solr_mapper.application.dto import QueryRequest
from solr_mapper.domain.query import (
    EqualityClause,
    Order,
    QueryExpression,
    RangeClause,
    SortOrder,
    SortSpec,
    escape_query_value,
    format_value,
)


class TestClauses:
    """Test single clause serialization."""

    def test_equality(self):
        assert EqualityClause("id", 123456).to_query() == "id:123456"

    def test_equality_value_is_verbatim(self):
        assert EqualityClause("title", "foo bar*").to_query() == "title:foo bar*"

    def test_inclusive_range(self):
        assert RangeClause("id", 123, 456).to_query() == "id:[123 TO 456]"

    def test_exclusive_range(self):
        assert RangeClause("id", 123, 456, inclusive=False).to_query() == "id:{123 TO 456}"

    def test_with_inclusive_returns_new_clause(self):
        clause = RangeClause("id", 1, 2)
        exclusive = clause.with_inclusive(False)
        assert clause.inclusive is True
        assert exclusive.inclusive is False


class TestQueryExpression:
    """Test clause concatenation."""

    def test_clauses_join_with_single_space(self):
        expr = QueryExpression().append(RangeClause("id", 123, 456)).append(RangeClause("p", "a", "z"))
        assert expr.to_query() == "id:[123 TO 456] p:[a TO z]"

    def test_append_does_not_mutate(self):
        base = QueryExpression()
        base.append(EqualityClause("id", 1))
        assert base.to_query() == ""
        assert not base

    def test_raw(self):
        assert str(QueryExpression.raw("id:123")) == "id:123"

    def test_replace_last(self):
        expr = QueryExpression().append(RangeClause("id", 1, 2))
        expr = expr.replace_last(RangeClause("id", 1, 2, inclusive=False))
        assert expr.to_query() == "id:{1 TO 2}"


class TestSortSpec:
    """Test sort parameter serialization."""

    def test_single(self):
        assert SortSpec((SortOrder("id", Order.ASC),)).to_param() == "id asc"

    def test_multiple_keep_order(self):
        spec = SortSpec().then("id", Order.ASC).then("name", Order.DESC)
        assert spec.to_param() == "id asc,name desc"

    def test_default_direction_is_ascending(self):
        assert SortOrder("id").to_param() == "id asc"

    def test_parse(self):
        assert SortSpec.parse("id asc, name DESC").to_param() == "id asc,name desc"
        assert SortSpec.parse("id").to_param() == "id asc"

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            SortSpec.parse("id sideways")


class TestFormatting:
    """Test value rendering and escaping."""

    def test_bool(self):
        assert format_value(True) == "true"
        assert format_value(False) == "false"

    def test_datetime_is_rendered_in_utc(self):
        value = datetime(2008, 3, 14, 17, 9, 26, tzinfo=timezone(timedelta(hours=2)))
        assert format_value(value) == "2008-03-14T15:09:26Z"

    def test_naive_datetime(self):
        assert format_value(datetime(2008, 3, 14, 15, 9, 26)) == "2008-03-14T15:09:26Z"

    def test_decimal_without_exponent(self):
        assert format_value(Decimal("1E+2")) == "100"

    def test_escape_reserved_characters(self):
        assert escape_query_value("a:b [c] d") == r"a\:b\ \[c\]\ d"

    def test_escape_plain_text_unchanged(self):
        assert escape_query_value("plain") == "plain"


class TestQueryRequest:
    """Test request parameter assembly."""

    def test_only_q_by_default(self):
        req = QueryRequest(QueryExpression.raw("id:123"))
        assert req.to_params() == {"q": "id:123"}

    def test_full_parameter_order(self):
        req = QueryRequest(QueryExpression.raw("id:123"), SortSpec.parse("id asc"), start=10, rows=20)
        assert list(req.to_params().items()) == [
            ("q", "id:123"),
            ("sort", "id asc"),
            ("start", "10"),
            ("rows", "20"),
        ]

    def test_zero_pagination_is_sent(self):
        req = QueryRequest(QueryExpression.raw("*:*"), start=0, rows=0)
        assert req.to_params() == {"q": "*:*", "start": "0", "rows": "0"}
