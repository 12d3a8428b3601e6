# cmdstack/core/commands/query.py
"""Search filters and the predicate built from them.

A predicate is a plain value: a conjunction of "column contains text"
clauses. It knows nothing about SQL; the repository renders it into a
parameterized WHERE clause. This keeps predicate construction testable
without a database.
"""

from dataclasses import dataclass
from enum import Enum

from cmdstack.core.commands.errors import InvalidFilterError


class FilterField(Enum):
    """Searchable fields, mapped to their column in the command table."""

    TAG = "tags"
    COMMAND = "command"
    ALIAS = "alias"

    @property
    def column(self) -> str:
        return self.value


@dataclass(frozen=True)
class SearchFilters:
    """The triple of optional substrings used to narrow a search.

    Attributes:
        command: Text the command string must contain.
        alias: Text the alias must contain.
        tag: Text the tags must contain.
    """

    command: str = ""
    alias: str = ""
    tag: str = ""

    def is_empty(self) -> bool:
        return not (self.command or self.alias or self.tag)

    def criteria(self) -> list[tuple[FilterField, str]]:
        """Non-empty criteria in precedence order: tag, command, alias."""
        pairs = (
            (FilterField.TAG, self.tag),
            (FilterField.COMMAND, self.command),
            (FilterField.ALIAS, self.alias),
        )
        return [(field, value) for field, value in pairs if value]


@dataclass(frozen=True)
class LikeClause:
    """A single "field contains value" constraint."""

    field: FilterField
    value: str


@dataclass(frozen=True)
class Predicate:
    """Conjunction of LikeClauses; a row must satisfy every clause."""

    clauses: tuple[LikeClause, ...]

    def __bool__(self) -> bool:
        return bool(self.clauses)

    def fields(self) -> list[FilterField]:
        return [clause.field for clause in self.clauses]


def build_predicate(filters: SearchFilters) -> Predicate:
    """Build the conjunctive predicate for a filter set.

    Absent (empty) criteria impose no constraint.

    Args:
        filters: Filter set with zero to three non-empty fields.

    Returns:
        Predicate with one clause per non-empty field.

    Raises:
        InvalidFilterError: If every field is empty.

    Examples:
        >>> build_predicate(SearchFilters(command="ls")).fields()
        [<FilterField.COMMAND: 'command'>]
    """
    if filters.is_empty():
        raise InvalidFilterError("At least one of command, alias or tag is required")

    return Predicate(
        clauses=tuple(LikeClause(field, value) for field, value in filters.criteria())
    )
