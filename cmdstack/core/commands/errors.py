"""
Exception hierarchy for the command store.
Store operations raise subclasses of CommandStackError, never bare Exception.
"""

__all__ = [
    "CommandStackError",
    "InvalidArgumentError",
    "InvalidFilterError",
    "NotFoundError",
    "StorageError",
]


class CommandStackError(Exception):
    """Root exception for all cmdstack errors."""


# ── Caller errors ─────────────────────────────────────────────────────────────

class InvalidArgumentError(CommandStackError):
    """Raised for malformed or missing input (non-positive limit, null id...)."""


class InvalidFilterError(InvalidArgumentError):
    """Raised when a search is requested with every filter empty."""


# ── Lookup ────────────────────────────────────────────────────────────────────

class NotFoundError(CommandStackError):
    """Raised when an operation targets a command id that does not exist."""

    def __init__(self, command_id: int) -> None:
        super().__init__(f"No command found with id: {command_id}")
        self.command_id = command_id


# ── Storage ───────────────────────────────────────────────────────────────────

class StorageError(CommandStackError):
    """Raised on SQLite open, prepare, execute or fetch failures."""
