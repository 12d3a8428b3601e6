# cmdstack/core/commands/models.py
"""Command data model for saved shell commands.

This module defines the Command dataclass which represents a bookmarked
shell command with its alias, tags and note, plus the fixed-width
rendering used when a list of commands is shown to the user.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from cmdstack.core.commands.errors import InvalidArgumentError

ELLIPSIS = "..."
COLUMN_SEPARATOR = " | "


class PrintStyle(str, Enum):
    """Which part of a command is shown in a list of choices."""

    ALL = "all"
    COMMAND = "command"
    ALIAS = "alias"

    @classmethod
    def parse(cls, value: "PrintStyle | str") -> "PrintStyle":
        """Convert a style name to a PrintStyle.

        Raises:
            InvalidArgumentError: If the name is not a known style.
        """
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(style.value for style in cls)
            raise InvalidArgumentError(
                f"Invalid print style {value!r} (expected one of: {choices})"
            ) from None


class ColumnWidths(NamedTuple):
    """Character budget per column for Command.format()."""

    alias: int = 25
    command: int = 50
    tags: int = 10
    note: int = 50


DEFAULT_WIDTHS = ColumnWidths()


def fit(text: str, width: int) -> str:
    """Truncate text with an ellipsis or right-pad it to exactly width chars.

    Text longer than the budget keeps its first ``width - 3`` characters
    followed by "...".
    """
    if len(text) > width:
        return text[: max(width - len(ELLIPSIS), 0)] + ELLIPSIS
    return text.ljust(width)


@dataclass
class Command:
    """Represents a saved shell command.

    Attributes:
        id: Unique identifier assigned by the database (None until saved).
        alias: Display name, defaults to the command text.
        command: The literal shell command string.
        tags: Free-form tags, conventionally comma-separated.
        note: Free-form annotation.
        last_used: Unix timestamp of creation or of the last selection.

    Example:
        >>> cmd = Command(id=1, alias="ls-la", command="ls -la",
        ...               tags="fs,list", note="", last_used=1700000000)
        >>> cmd.select_field("alias")
        'ls-la'
    """

    id: int | None
    alias: str
    command: str
    tags: str = ""
    note: str = ""
    last_used: int = 0

    def format(self, widths: ColumnWidths = DEFAULT_WIDTHS) -> str:
        """Render the command as one aligned, pipe-delimited line.

        Args:
            widths: Per-column character budgets, shared by every line of
                a single render so the columns align.

        Returns:
            ``alias | command | tags | note`` with each field fitted to
            its budget.
        """
        return COLUMN_SEPARATOR.join(
            (
                fit(self.alias, widths.alias),
                fit(self.command, widths.command),
                fit(self.tags, widths.tags),
                fit(self.note, widths.note),
            )
        )

    def select_field(
        self, style: PrintStyle | str, widths: ColumnWidths = DEFAULT_WIDTHS
    ) -> str:
        """Return the text shown for this command under a print style.

        Args:
            style: ``all`` for the formatted line, ``command`` or ``alias``
                for that field alone.
            widths: Column budgets used for the ``all`` style.

        Raises:
            InvalidArgumentError: If style is not a known print style.
        """
        style = PrintStyle.parse(style)
        if style is PrintStyle.COMMAND:
            return self.command
        if style is PrintStyle.ALIAS:
            return self.alias
        return self.format(widths)


def header(style: PrintStyle | str) -> str:
    """Column caption describing what each line of a listing shows."""
    style = PrintStyle.parse(style)
    if style is PrintStyle.COMMAND:
        return "Command"
    if style is PrintStyle.ALIAS:
        return "Alias"
    return "Alias | Command | Tags | Note"


def format_commands(
    commands: Iterable[Command],
    style: PrintStyle | str,
    widths: ColumnWidths = DEFAULT_WIDTHS,
) -> list[str]:
    """Render each command with the same style and column widths."""
    style = PrintStyle.parse(style)
    return [cmd.select_field(style, widths) for cmd in commands]
