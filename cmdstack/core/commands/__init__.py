"""Command module for saved shell command storage and search.

This module provides:
- Command: Data model for a saved command, with list formatting
- SearchFilters / build_predicate: Filter set and the predicate built from it
- CommandRepository: SQLite repository for command persistence
- refine / cascading_search: In-memory substring-or-fuzzy refinement
- export_commands / import_commands: JSON transfer of the command table
- User operations: add_command, get_command, search_commands, list_commands,
  update_command, use_command, delete_command
"""

from cmdstack.core.commands.errors import (
    CommandStackError,
    InvalidArgumentError,
    InvalidFilterError,
    NotFoundError,
    StorageError,
)
from cmdstack.core.commands.filters import (
    cascading_search,
    filter_by_alias_substring,
    filter_by_command_substring,
    filter_by_tag_substring,
    fuzzy_match,
    refine,
)
from cmdstack.core.commands.models import ColumnWidths, Command, PrintStyle
from cmdstack.core.commands.query import SearchFilters, build_predicate
from cmdstack.core.commands.repository import CommandRepository
from cmdstack.core.commands.tools import (
    add_command,
    delete_command,
    get_command,
    list_commands,
    search_commands,
    update_command,
    use_command,
)
from cmdstack.core.commands.transfer import export_commands, import_commands

__all__ = [
    "Command",
    "ColumnWidths",
    "PrintStyle",
    "SearchFilters",
    "build_predicate",
    "CommandRepository",
    "refine",
    "cascading_search",
    "fuzzy_match",
    "filter_by_command_substring",
    "filter_by_alias_substring",
    "filter_by_tag_substring",
    "export_commands",
    "import_commands",
    "add_command",
    "get_command",
    "search_commands",
    "list_commands",
    "update_command",
    "use_command",
    "delete_command",
    "CommandStackError",
    "InvalidArgumentError",
    "InvalidFilterError",
    "NotFoundError",
    "StorageError",
]
