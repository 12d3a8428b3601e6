# cmdstack/core/commands/filters.py
"""In-memory refinement of already-fetched commands.

A record passes a filter when its field contains the filter text, or when
the text fuzzily matches the field. Fuzzy matching accepts either:

- a case-insensitive subsequence match ("gco" matches "git checkout"), or
- a difflib similarity ratio of at least FUZZY_RATIO_THRESHOLD against the
  whole field or one of its whitespace/comma separated tokens, which lets
  small typos through ("dokcer" matches "docker ps").

Filters are applied as a pipeline of independent stages in the fixed order
tag, command, alias. Each stage only narrows the previous stage's output.
"""

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from difflib import SequenceMatcher

from cmdstack.core.commands.errors import InvalidFilterError
from cmdstack.core.commands.models import Command
from cmdstack.core.commands.query import (
    FilterField,
    LikeClause,
    Predicate,
    SearchFilters,
)
from cmdstack.core.commands.repository import CommandRepository

logger = logging.getLogger(__name__)

FUZZY_RATIO_THRESHOLD = 0.75

_TOKEN_SPLIT = re.compile(r"[\s,]+")


def substring_match(needle: str, haystack: str) -> bool:
    return needle in haystack


def subsequence_match(needle: str, haystack: str) -> bool:
    """True if every character of needle appears in haystack, in order.

    Comparison is case-insensitive.
    """
    remaining = iter(haystack.lower())
    return all(char in remaining for char in needle.lower())


def similarity(a: str, b: str) -> float:
    """Case-insensitive difflib ratio between two strings (0.0 to 1.0)."""
    return SequenceMatcher(None, a.lower(), b.lower()).ratio()


def fuzzy_match(
    needle: str, haystack: str, threshold: float = FUZZY_RATIO_THRESHOLD
) -> bool:
    """Approximate match used as a fallback to substring matching.

    Args:
        needle: Text the user typed.
        haystack: Field value to compare against.
        threshold: Minimum similarity ratio for the typo-tolerant check.

    Returns:
        True on a subsequence match, or when the needle is similar enough
        to the whole haystack or to any one of its tokens.
    """
    if not needle:
        return True
    if not haystack:
        return False
    if subsequence_match(needle, haystack):
        return True

    candidates = [haystack]
    candidates.extend(token for token in _TOKEN_SPLIT.split(haystack) if token)
    return any(similarity(needle, candidate) >= threshold for candidate in candidates)


def matches(needle: str, haystack: str) -> bool:
    """Substring-or-fuzzy test. An empty needle matches everything."""
    if not needle:
        return True
    return substring_match(needle, haystack) or fuzzy_match(needle, haystack)


_FIELD_GETTERS: dict[FilterField, Callable[[Command], str]] = {
    FilterField.TAG: lambda cmd: cmd.tags,
    FilterField.COMMAND: lambda cmd: cmd.command,
    FilterField.ALIAS: lambda cmd: cmd.alias,
}


def _filter_by(
    records: Iterable[Command], field: FilterField, text: str
) -> list[Command]:
    getter = _FIELD_GETTERS[field]
    return [record for record in records if matches(text, getter(record))]


def filter_by_command_substring(records: Iterable[Command], text: str) -> list[Command]:
    """Keep records whose command text matches text (substring or fuzzy)."""
    return _filter_by(records, FilterField.COMMAND, text)


def filter_by_alias_substring(records: Iterable[Command], text: str) -> list[Command]:
    """Keep records whose alias matches text (substring or fuzzy)."""
    return _filter_by(records, FilterField.ALIAS, text)


def filter_by_tag_substring(records: Iterable[Command], text: str) -> list[Command]:
    """Keep records whose tags match text (substring or fuzzy)."""
    return _filter_by(records, FilterField.TAG, text)


@dataclass(frozen=True)
class FilterStage:
    """One step of the refinement pipeline."""

    field: FilterField
    text: str

    def apply(self, records: Iterable[Command]) -> list[Command]:
        return _filter_by(records, self.field, self.text)


def build_pipeline(filters: SearchFilters) -> list[FilterStage]:
    """One stage per non-empty filter, ordered tag, command, alias."""
    return [FilterStage(field, text) for field, text in filters.criteria()]


def run_pipeline(
    records: Sequence[Command], stages: Iterable[FilterStage]
) -> list[Command]:
    narrowed = list(records)
    for stage in stages:
        narrowed = stage.apply(narrowed)
        logger.debug(
            "Stage %s=%r left %d command(s)",
            stage.field.column,
            stage.text,
            len(narrowed),
        )
    return narrowed


def refine(records: Sequence[Command], filters: SearchFilters) -> list[Command]:
    """Narrow a fetched list by every non-empty filter, in memory.

    An empty filter set returns the records unchanged.
    """
    return run_pipeline(records, build_pipeline(filters))


def cascading_search(repo: CommandRepository, filters: SearchFilters) -> list[Command]:
    """Query storage by one criterion, then narrow the result in memory.

    Criteria are tried against storage in order (tag, then command, then
    alias) until one query returns rows. Those rows are then refined in
    memory by every other criterion, including the ones whose storage query
    came back empty, so a typo in an early criterion still lets later
    criteria find records through fuzzy matching. Storage is not queried
    again once a query has produced rows.

    Args:
        repo: An open CommandRepository.
        filters: Filter set with at least one non-empty field.

    Returns:
        Matching commands ordered by id; empty list if no storage query
        returned rows or refinement removed them all.

    Raises:
        InvalidFilterError: If every filter is empty.
    """
    stages = build_pipeline(filters)
    if not stages:
        raise InvalidFilterError("At least one of command, alias or tag is required")

    for index, anchor in enumerate(stages):
        fetched = repo.find(Predicate(clauses=(LikeClause(anchor.field, anchor.text),)))
        if fetched:
            rest = stages[:index] + stages[index + 1 :]
            return run_pipeline(fetched, rest)
        logger.debug(
            "Storage query on %s=%r found nothing", anchor.field.column, anchor.text
        )
    return []
