# cmdstack/core/commands/repository.py
"""SQLite repository for Command persistence.

This module provides CRUD operations for saved commands using sqlite3,
search through a Predicate rendered to a parameterized WHERE clause, and
the last-used bookkeeping that drives recency ordering.
"""

import logging
import os
import sqlite3
import time
from collections.abc import Callable, Iterable
from types import TracebackType
from typing import Any

from cmdstack.core.commands.errors import (
    InvalidArgumentError,
    NotFoundError,
    StorageError,
)
from cmdstack.core.commands.models import Command
from cmdstack.core.commands.query import Predicate, SearchFilters, build_predicate

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS command (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        alias TEXT,
        command TEXT,
        tags TEXT,
        note TEXT,
        last_used INTEGER
    )
"""

_COLUMNS = "id, alias, command, tags, note, last_used"

# SQLITE_MAX_LIKE_PATTERN_LENGTH default, in bytes
LIKE_PATTERN_LIMIT = 50_000


def _unix_now() -> int:
    return int(time.time())


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def render_predicate(predicate: Predicate) -> tuple[str, list[str]]:
    """Render a Predicate as a WHERE expression plus bound parameters.

    Column names come from FilterField, never from user input; every
    user-supplied substring is bound as a parameter. Substrings whose LIKE
    pattern would exceed SQLite's pattern limit are matched with
    instr() on lower-cased operands instead, which keeps the same ASCII
    case-insensitive containment.

    Args:
        predicate: Conjunction of LikeClauses (must not be empty).

    Returns:
        Tuple of (sql expression, parameter list).

    Example:
        >>> from cmdstack.core.commands.query import SearchFilters, build_predicate
        >>> render_predicate(build_predicate(SearchFilters(tag="fs")))
        ("tags LIKE ? ESCAPE '\\\\'", ['%fs%'])
    """
    if not predicate:
        raise InvalidArgumentError("Cannot render an empty predicate")

    conditions = []
    params = []
    for clause in predicate.clauses:
        column = clause.field.column
        pattern = f"%{escape_like(clause.value)}%"
        if len(pattern.encode("utf-8")) > LIKE_PATTERN_LIMIT:
            conditions.append(f"instr(lower({column}), lower(?)) > 0")
            params.append(clause.value)
        else:
            conditions.append(f"{column} LIKE ? ESCAPE '\\'")
            params.append(pattern)
    return " AND ".join(conditions), params


class CommandRepository:
    """Repository for storing and retrieving saved commands from SQLite.

    The repository owns a single connection with an explicit lifecycle:
    call open() and close(), or use it as a context manager. The database
    directory and table are created when the connection is opened.

    Attributes:
        db_path: Path to the SQLite database file (or ":memory:").

    Example:
        >>> with CommandRepository(db_path=":memory:") as repo:
        ...     command_id = repo.add("ls-la", "ls -la", "fs,list", "")
        ...     repo.get_by_id(command_id).alias
        'ls-la'
    """

    def __init__(
        self,
        db_path: str = "~/.cmdstack/cmdstack.db",
        clock: Callable[[], int] | None = None,
    ) -> None:
        """Initialize the CommandRepository.

        Args:
            db_path: Path to the SQLite database file. "~" is expanded.
            clock: Returns the current Unix time in seconds. Defaults to
                the system clock.
        """
        self.db_path = db_path if db_path == MEMORY_DB else os.path.expanduser(db_path)
        self._clock = clock or _unix_now
        self._conn: sqlite3.Connection | None = None

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def open(self) -> "CommandRepository":
        """Open the connection and create the schema if needed.

        Raises:
            StorageError: If the database cannot be opened or initialized.
        """
        if self._conn is not None:
            return self

        try:
            if self.db_path != MEMORY_DB:
                db_dir = os.path.dirname(self.db_path)
                if db_dir:
                    os.makedirs(db_dir, exist_ok=True)

            conn = sqlite3.connect(self.db_path)
        except (OSError, sqlite3.Error) as e:
            logger.error("Failed to open database %s: %s", self.db_path, e)
            raise StorageError(f"Failed to open database {self.db_path}: {e}") from e

        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(_SCHEMA)
            conn.commit()
        except sqlite3.Error as e:
            conn.close()
            logger.error("Failed to initialize schema in %s: %s", self.db_path, e)
            raise StorageError(f"Failed to initialize database: {e}") from e

        self._conn = conn
        logger.debug("Opened command database %s", self.db_path)
        return self

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._conn is None:
            return
        try:
            self._conn.close()
        finally:
            self._conn = None
            logger.debug("Closed command database %s", self.db_path)

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def __enter__(self) -> "CommandRepository":
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ── Internal helpers ──────────────────────────────────────────────────

    def _execute(
        self, sql: str, params: Iterable[Any] = (), commit: bool = False
    ) -> sqlite3.Cursor:
        """Run one statement, converting sqlite3 failures to StorageError."""
        if self._conn is None:
            raise StorageError("Command database is not open")
        try:
            cursor = self._conn.execute(sql, tuple(params))
            if commit:
                self._conn.commit()
            return cursor
        except sqlite3.Error as e:
            logger.error("Statement failed (%s): %s", sql.split()[0], e)
            raise StorageError(f"Database operation failed: {e}") from e

    def _fetch_all(self, sql: str, params: Iterable[Any] = ()) -> list[Command]:
        cursor = self._execute(sql, params)
        try:
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read rows: {e}") from e
        return [self._row_to_command(row) for row in rows]

    @staticmethod
    def _row_to_command(row: sqlite3.Row) -> Command:
        """Convert a database row to a Command object."""
        return Command(
            id=row["id"],
            alias=row["alias"] or "",
            command=row["command"] or "",
            tags=row["tags"] or "",
            note=row["note"] or "",
            last_used=row["last_used"] or 0,
        )

    @staticmethod
    def _require_id(command_id: int | None) -> int:
        if command_id is None:
            raise InvalidArgumentError("Command id is required")
        return command_id

    @staticmethod
    def _normalize(alias: str, command: str) -> tuple[str, str]:
        """Validate command text and apply the alias fallback."""
        if not command:
            raise InvalidArgumentError("Command text must not be empty")
        return (alias or command), command

    # ── Create ────────────────────────────────────────────────────────────

    def add(
        self,
        alias: str,
        command: str,
        tags: str = "",
        note: str = "",
        last_used: int | None = None,
    ) -> int:
        """Insert a new command.

        Args:
            alias: Display name. Empty falls back to the command text.
            command: The shell command string (required).
            tags: Free-form tags.
            note: Free-form annotation.
            last_used: Initial timestamp; defaults to now.

        Returns:
            The database-assigned id.

        Raises:
            InvalidArgumentError: If command is empty.
            StorageError: If the insert fails.
        """
        alias, command = self._normalize(alias, command)
        stamp = self._clock() if last_used is None else last_used
        cursor = self._execute(
            "INSERT INTO command (alias, command, tags, note, last_used) "
            "VALUES (?, ?, ?, ?, ?)",
            (alias, command, tags, note, stamp),
            commit=True,
        )
        command_id = cursor.lastrowid
        logger.info("Added command %s (%s)", command_id, alias)
        return command_id  # type: ignore[return-value]

    # ── Read ──────────────────────────────────────────────────────────────

    def get_by_id(self, command_id: int) -> Command:
        """Retrieve a command by id.

        Raises:
            NotFoundError: If no command has this id.
        """
        command_id = self._require_id(command_id)
        commands = self._fetch_all(
            f"SELECT {_COLUMNS} FROM command WHERE id = ?", (command_id,)
        )
        if not commands:
            logger.debug("Command %s does not exist", command_id)
            raise NotFoundError(command_id)
        return commands[0]

    def exists(self, command_id: int) -> bool:
        row = self._execute(
            "SELECT 1 FROM command WHERE id = ?", (command_id,)
        ).fetchone()
        return row is not None

    def search(self, filters: SearchFilters) -> list[Command]:
        """Find commands matching every non-empty filter.

        Matching is substring containment (SQLite LIKE, case-insensitive
        for ASCII). The filter set is validated before any SQL runs.

        Args:
            filters: Command, alias and tag substrings.

        Returns:
            Matching commands ordered by id; empty list if none match.

        Raises:
            InvalidFilterError: If every filter is empty.
        """
        predicate = build_predicate(filters)
        return self.find(predicate)

    def find(self, predicate: Predicate) -> list[Command]:
        """Run an already-built predicate against the command table."""
        where, params = render_predicate(predicate)
        commands = self._fetch_all(
            f"SELECT {_COLUMNS} FROM command WHERE {where} ORDER BY id", params
        )
        logger.debug(
            "Search on %s matched %d command(s)",
            ",".join(field.column for field in predicate.fields()),
            len(commands),
        )
        return commands

    def list_all(self, limit: int, order_by_recency: bool = False) -> list[Command]:
        """List up to limit commands.

        Args:
            limit: Maximum number of commands to return (must be positive).
            order_by_recency: Most recently used first (ties by newest id);
                otherwise insertion order.

        Raises:
            InvalidArgumentError: If limit is not positive.
        """
        if limit <= 0:
            raise InvalidArgumentError(f"limit must be positive, got {limit}")

        order = "last_used DESC, id DESC" if order_by_recency else "id ASC"
        return self._fetch_all(
            f"SELECT {_COLUMNS} FROM command ORDER BY {order} LIMIT ?", (limit,)
        )

    def count(self) -> int:
        """Return total number of stored commands."""
        return self._execute("SELECT COUNT(*) FROM command").fetchone()[0]

    # ── Update ────────────────────────────────────────────────────────────

    def update_by_id(
        self, command_id: int, alias: str, command: str, tags: str, note: str
    ) -> Command:
        """Replace every mutable field of a command and refresh last_used.

        All four values are written as given; deciding which fields keep
        their old value is the caller's job. An empty alias falls back to
        the new command text.

        Returns:
            The updated Command.

        Raises:
            InvalidArgumentError: If command is empty.
            NotFoundError: If no command has this id.
        """
        command_id = self._require_id(command_id)
        alias, command = self._normalize(alias, command)
        cursor = self._execute(
            """
            UPDATE command SET
                alias = ?,
                command = ?,
                tags = ?,
                note = ?,
                last_used = ?
            WHERE id = ?
            """,
            (alias, command, tags, note, self._clock(), command_id),
            commit=True,
        )
        if cursor.rowcount == 0:
            raise NotFoundError(command_id)

        logger.info("Updated command %s", command_id)
        return self.get_by_id(command_id)

    def touch_last_used(self, command_id: int | None) -> int:
        """Stamp a command as used now without touching other fields.

        Called once per user selection, not per search.

        Returns:
            The new last_used timestamp.

        Raises:
            InvalidArgumentError: If command_id is None.
            NotFoundError: If no command has this id.
        """
        command_id = self._require_id(command_id)
        stamp = self._clock()
        cursor = self._execute(
            "UPDATE command SET last_used = ? WHERE id = ?",
            (stamp, command_id),
            commit=True,
        )
        if cursor.rowcount == 0:
            raise NotFoundError(command_id)

        logger.debug("Command %s used at %d", command_id, stamp)
        return stamp

    # ── Delete ────────────────────────────────────────────────────────────

    def delete_by_id(self, command_id: int) -> None:
        """Delete a command permanently.

        Existence is checked with a separate read before the delete.

        Raises:
            NotFoundError: If no command has this id.
        """
        command_id = self._require_id(command_id)
        if not self.exists(command_id):
            raise NotFoundError(command_id)

        self._execute("DELETE FROM command WHERE id = ?", (command_id,), commit=True)
        logger.info("Deleted command %s", command_id)
