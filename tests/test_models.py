"""Tests for the Command model and its list formatting."""

import pytest

from cmdstack.core.commands.errors import InvalidArgumentError
from cmdstack.core.commands.models import (
    ColumnWidths,
    Command,
    PrintStyle,
    fit,
    format_commands,
    header,
)


def _command(**overrides) -> Command:
    fields = {
        "id": 1,
        "alias": "ls-la",
        "command": "ls -la",
        "tags": "fs,list",
        "note": "",
        "last_used": 1_700_000_000,
    }
    fields.update(overrides)
    return Command(**fields)


class TestFit:
    """Test suite for column fitting."""

    def test_short_text_is_padded(self) -> None:
        """Text under budget is right-padded to the budget."""
        assert fit("abc", 6) == "abc   "

    def test_exact_length_is_unchanged(self) -> None:
        """Text exactly at budget is neither padded nor cut."""
        assert fit("abcdef", 6) == "abcdef"

    def test_long_text_is_truncated_with_ellipsis(self) -> None:
        """Text over budget keeps B-3 chars followed by '...'."""
        assert fit("abcdefghij", 6) == "abc..."
        assert len(fit("x" * 100, 25)) == 25


class TestCommandFormat:
    """Test suite for Command.format()."""

    def test_format_fields_in_order(self) -> None:
        """Formatted line is alias | command | tags | note."""
        line = _command(note="list files").format()
        parts = line.split(" | ")

        assert [p.strip() for p in parts] == ["ls-la", "ls -la", "fs,list", "list files"]

    def test_format_uses_default_widths(self) -> None:
        """Each column is padded to its default budget."""
        parts = _command().format().split(" | ")

        assert [len(p) for p in parts] == [25, 50, 10, 50]

    def test_format_truncates_long_fields(self) -> None:
        """A field longer than its budget ends with an ellipsis."""
        cmd = _command(tags="network,docker,k8s")
        tags_column = cmd.format().split(" | ")[2]

        assert tags_column == "network..."

    def test_formatted_lines_align(self) -> None:
        """Lines of different commands have equal length."""
        short = _command(alias="a", command="b", tags="", note="")
        long = _command(alias="x" * 40, command="y" * 80, tags="z" * 20, note="n" * 60)

        assert len(short.format()) == len(long.format())

    def test_format_with_custom_widths(self) -> None:
        """Custom budgets apply to every column."""
        widths = ColumnWidths(alias=5, command=8, tags=4, note=4)
        line = _command(command="docker compose up").format(widths)

        assert line == "ls-la | docke... | f... |     "


class TestSelectField:
    """Test suite for Command.select_field()."""

    def test_all_returns_formatted_line(self) -> None:
        cmd = _command()
        assert cmd.select_field(PrintStyle.ALL) == cmd.format()

    def test_command_returns_command_text(self) -> None:
        assert _command().select_field("command") == "ls -la"

    def test_alias_returns_alias(self) -> None:
        assert _command().select_field(PrintStyle.ALIAS) == "ls-la"

    def test_unknown_style_raises(self) -> None:
        with pytest.raises(InvalidArgumentError):
            _command().select_field("everything")


class TestFormatCommands:
    """Test suite for header() and format_commands()."""

    def test_header_per_style(self) -> None:
        assert header("all") == "Alias | Command | Tags | Note"
        assert header("command") == "Command"
        assert header(PrintStyle.ALIAS) == "Alias"

    def test_format_commands_preserves_order(self) -> None:
        commands = [_command(id=1, alias="one"), _command(id=2, alias="two")]

        assert format_commands(commands, "alias") == ["one", "two"]

    def test_format_commands_empty(self) -> None:
        assert format_commands([], "all") == []

    def test_id_defaults_are_explicit(self) -> None:
        """An unsaved command has id None and empty optional fields."""
        cmd = Command(id=None, alias="a", command="b")

        assert cmd.id is None
        assert cmd.tags == ""
        assert cmd.note == ""
        assert cmd.last_used == 0
