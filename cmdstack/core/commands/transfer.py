# cmdstack/core/commands/transfer.py
"""JSON export and import of saved commands.

The file format is a JSON array of CommandRecord objects. Ids are not
exported; imported commands get fresh ids from the target database.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from cmdstack.core.commands.errors import InvalidArgumentError
from cmdstack.core.commands.models import Command
from cmdstack.core.commands.repository import CommandRepository

logger = logging.getLogger(__name__)


class CommandRecord(BaseModel):
    """Serialized form of a saved command.

    Attributes:
        alias: Display name (empty falls back to the command on import).
        command: The shell command string.
        tags: Free-form tags.
        note: Free-form annotation.
        last_used: Unix timestamp; None means "now" on import.
    """

    alias: str = Field("", description="Display name")
    command: str = Field(..., min_length=1, description="Shell command string")
    tags: str = Field("", description="Comma-separated tags")
    note: str = Field("", description="Free-form note")
    last_used: int | None = Field(None, description="Unix timestamp of last use")

    @classmethod
    def from_command(cls, cmd: Command) -> "CommandRecord":
        return cls(
            alias=cmd.alias,
            command=cmd.command,
            tags=cmd.tags,
            note=cmd.note,
            last_used=cmd.last_used,
        )


_records_adapter = TypeAdapter(list[CommandRecord])


def _require_json_path(path: str | Path) -> Path:
    path = Path(path).expanduser()
    if path.suffix.lower() != ".json":
        raise InvalidArgumentError(f"File must be a JSON file: {path}")
    return path


def export_commands(repo: CommandRepository, path: str | Path) -> int:
    """Write every stored command to a JSON file.

    Args:
        repo: An open CommandRepository.
        path: Destination file; must end with .json.

    Returns:
        Number of commands written.

    Raises:
        InvalidArgumentError: If the path is not a .json file or cannot be
            written.
    """
    path = _require_json_path(path)
    # list_all needs a positive limit, even for an empty table
    commands = repo.list_all(max(repo.count(), 1))
    records = [CommandRecord.from_command(cmd) for cmd in commands]

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(_records_adapter.dump_json(records, indent=2))
    except OSError as e:
        raise InvalidArgumentError(f"Cannot write {path}: {e}") from e

    logger.info("Exported %d command(s) to %s", len(records), path)
    return len(records)


def load_records(path: str | Path) -> list[CommandRecord]:
    """Read and validate an export file.

    Raises:
        InvalidArgumentError: If the file is missing, not UTF-8 JSON, or does not
            match the CommandRecord schema.
    """
    path = _require_json_path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InvalidArgumentError(f"Invalid command file {path}: not UTF-8 text") from e
    except OSError as e:
        raise InvalidArgumentError(f"Cannot read {path}: {e}") from e

    try:
        return _records_adapter.validate_json(raw)
    except ValidationError as e:
        raise InvalidArgumentError(
            f"Invalid command file {path}: {e.error_count()} error(s)\n{e}"
        ) from e


def import_commands(repo: CommandRepository, path: str | Path) -> int:
    """Add every command from an export file to the repository.

    The whole file is validated before anything is inserted.

    Returns:
        Number of commands imported.
    """
    records = load_records(path)
    for record in records:
        repo.add(
            alias=record.alias,
            command=record.command,
            tags=record.tags,
            note=record.note,
            last_used=record.last_used,
        )

    logger.info("Imported %d command(s) from %s", len(records), path)
    return len(records)


def dumps_commands(commands: list[Command]) -> str:
    """Serialize commands to the export format without touching disk."""
    records = [CommandRecord.from_command(cmd) for cmd in commands]
    return _records_adapter.dump_json(records, indent=2).decode("utf-8")
