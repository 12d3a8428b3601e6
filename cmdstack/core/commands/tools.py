# cmdstack/core/commands/tools.py
"""User-facing command operations.

Each function takes an open CommandRepository and returns the message to
show the user. Caller errors (unknown id, invalid input) become
"Error: ..." messages; StorageError propagates so the caller can abort.
"""

import logging

from cmdstack.core.commands.errors import InvalidArgumentError, NotFoundError
from cmdstack.core.commands.filters import cascading_search
from cmdstack.core.commands.models import Command, PrintStyle, format_commands, header
from cmdstack.core.commands.query import SearchFilters
from cmdstack.core.commands.repository import CommandRepository

logger = logging.getLogger(__name__)


def _listing(commands: list[Command], style: PrintStyle | str, limit: int) -> str:
    """Numbered listing of at most limit commands, prefixed by their id."""
    style = PrintStyle.parse(style)
    shown = commands[:limit]
    lines = [f"Found {len(commands)} command(s) ({header(style)}):"]
    for cmd, text in zip(shown, format_commands(shown, style)):
        lines.append(f"[{cmd.id}] {text}")
    if len(commands) > len(shown):
        lines.append(f"... {len(commands) - len(shown)} more not shown")
    return "\n".join(lines)


def add_command(
    repo: CommandRepository,
    command: str,
    alias: str = "",
    tags: str = "",
    note: str = "",
) -> str:
    """Save a new command.

    Args:
        repo: Open repository.
        command: The shell command string.
        alias: Display name; defaults to the command text.
        tags: Comma-separated tags.
        note: Free-form note.

    Returns:
        Success message with the new id, or an error message.
    """
    try:
        command_id = repo.add(alias, command, tags, note)
    except InvalidArgumentError as e:
        return f"Error: {e}"
    return f"Command {command_id} added: {alias or command}"


def get_command(repo: CommandRepository, command_id: int) -> str:
    """Show every field of one command."""
    try:
        cmd = repo.get_by_id(command_id)
    except (NotFoundError, InvalidArgumentError) as e:
        return f"Error: {e}"

    return (
        f"Command #{cmd.id}\n"
        f"{'=' * 40}\n"
        f"Alias: {cmd.alias}\n"
        f"Command: {cmd.command}\n"
        f"Tags: {cmd.tags or 'none'}\n"
        f"Note: {cmd.note or 'none'}\n"
        f"Last used: {cmd.last_used}"
    )


def search_commands(
    repo: CommandRepository,
    filters: SearchFilters,
    style: PrintStyle | str = PrintStyle.ALL,
    limit: int = 10,
    fuzzy: bool = False,
) -> str:
    """Search saved commands and list the matches.

    Args:
        repo: Open repository.
        filters: Command, alias and tag substrings.
        style: What to show per match.
        limit: Maximum number of matches listed.
        fuzzy: Query storage with the first filter only and narrow the rest
            in memory with fuzzy matching.
    """
    try:
        if limit <= 0:
            raise InvalidArgumentError(f"limit must be positive, got {limit}")
        if fuzzy:
            commands = cascading_search(repo, filters)
        else:
            commands = repo.search(filters)
        if not commands:
            return "No commands found."
        return _listing(commands, style, limit)
    except InvalidArgumentError as e:
        return f"Error: {e}"


def list_commands(
    repo: CommandRepository,
    limit: int = 10,
    order_by_recency: bool = False,
    style: PrintStyle | str = PrintStyle.ALL,
) -> str:
    """List saved commands, optionally most recently used first."""
    try:
        commands = repo.list_all(limit, order_by_recency=order_by_recency)
        if not commands:
            return "No commands found. Use `cmdstack add` to save one."
        return _listing(commands, style, limit)
    except InvalidArgumentError as e:
        return f"Error: {e}"


def update_command(
    repo: CommandRepository,
    command_id: int,
    command: str | None = None,
    alias: str | None = None,
    tags: str | None = None,
    note: str | None = None,
) -> str:
    """Update a command, keeping the current value of every field left as None.

    An explicit empty string clears the field (an empty alias falls back
    to the command text).
    """
    try:
        current = repo.get_by_id(command_id)
        updated = repo.update_by_id(
            command_id,
            alias=current.alias if alias is None else alias,
            command=current.command if command is None else command,
            tags=current.tags if tags is None else tags,
            note=current.note if note is None else note,
        )
    except (NotFoundError, InvalidArgumentError) as e:
        return f"Error: {e}"
    return f"Command {updated.id} updated: {updated.alias}"


def use_command(repo: CommandRepository, command_id: int) -> str:
    """Select a command: stamp its last-used time and return its text.

    Returns:
        The command text verbatim, or an error message.
    """
    try:
        cmd = repo.get_by_id(command_id)
        repo.touch_last_used(cmd.id)
    except (NotFoundError, InvalidArgumentError) as e:
        return f"Error: {e}"
    logger.debug("Selected command %s", cmd.id)
    return cmd.command


def delete_command(repo: CommandRepository, command_id: int) -> str:
    """Delete a command by id."""
    try:
        repo.delete_by_id(command_id)
    except (NotFoundError, InvalidArgumentError) as e:
        return f"Error: {e}"
    return f"Command {command_id} deleted."
