"""Tests for search filters, predicate building and SQL rendering."""

import pytest

from cmdstack.core.commands.errors import InvalidArgumentError, InvalidFilterError
from cmdstack.core.commands.query import (
    FilterField,
    LikeClause,
    Predicate,
    SearchFilters,
    build_predicate,
)
from cmdstack.core.commands.repository import (
    LIKE_PATTERN_LIMIT,
    escape_like,
    render_predicate,
)


class TestSearchFilters:
    """Test suite for SearchFilters."""

    def test_default_is_empty(self) -> None:
        assert SearchFilters().is_empty()

    def test_any_field_makes_it_non_empty(self) -> None:
        assert not SearchFilters(command="ls").is_empty()
        assert not SearchFilters(alias="x").is_empty()
        assert not SearchFilters(tag="fs").is_empty()

    def test_criteria_order_is_tag_command_alias(self) -> None:
        filters = SearchFilters(command="ls", alias="list", tag="fs")

        assert [field for field, _ in filters.criteria()] == [
            FilterField.TAG,
            FilterField.COMMAND,
            FilterField.ALIAS,
        ]


class TestBuildPredicate:
    """Test suite for build_predicate()."""

    def test_all_empty_raises_invalid_filter(self) -> None:
        with pytest.raises(InvalidFilterError):
            build_predicate(SearchFilters())

    def test_invalid_filter_is_an_invalid_argument(self) -> None:
        """Callers catching InvalidArgumentError also see empty filter sets."""
        with pytest.raises(InvalidArgumentError):
            build_predicate(SearchFilters(command="", alias="", tag=""))

    def test_single_field(self) -> None:
        predicate = build_predicate(SearchFilters(command="ls"))

        assert predicate.clauses == (LikeClause(FilterField.COMMAND, "ls"),)

    def test_absent_fields_are_omitted(self) -> None:
        predicate = build_predicate(SearchFilters(alias="deploy", tag="k8s"))

        assert predicate.fields() == [FilterField.TAG, FilterField.ALIAS]

    def test_three_fields(self) -> None:
        predicate = build_predicate(SearchFilters(command="a", alias="b", tag="c"))

        assert len(predicate.clauses) == 3
        assert bool(predicate)


class TestRenderPredicate:
    """Test suite for the SQL rendering used by the repository."""

    def test_values_are_bound_not_inlined(self) -> None:
        predicate = build_predicate(SearchFilters(command="'; DROP TABLE command; --"))
        sql, params = render_predicate(predicate)

        assert "DROP" not in sql
        assert params == ["%'; DROP TABLE command; --%"]

    def test_conjunction_of_columns(self) -> None:
        predicate = build_predicate(SearchFilters(command="ls", tag="fs"))
        sql, params = render_predicate(predicate)

        assert sql == "tags LIKE ? ESCAPE '\\' AND command LIKE ? ESCAPE '\\'"
        assert params == ["%fs%", "%ls%"]

    def test_long_value_uses_instr(self) -> None:
        needle = "x" * LIKE_PATTERN_LIMIT
        predicate = build_predicate(SearchFilters(command=needle, tag="fs"))
        sql, params = render_predicate(predicate)

        assert sql == "tags LIKE ? ESCAPE '\\' AND instr(lower(command), lower(?)) > 0"
        assert params == ["%fs%", needle]

    def test_wildcards_are_escaped(self) -> None:
        assert escape_like("50%_off") == "50\\%\\_off"
        assert escape_like("a\\b") == "a\\\\b"

    def test_empty_predicate_is_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            render_predicate(Predicate(clauses=()))
