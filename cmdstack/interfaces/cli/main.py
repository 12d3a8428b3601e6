"""CLI entry point for cmdstack.

Every subcommand opens the command database, runs one operation and
closes the database again, on success and on failure alike.

Exit status: 0 on success, 1 for caller errors (unknown id, invalid input),
2 when the database itself fails.
"""

import argparse
import logging
import sys
import uuid
from collections.abc import Sequence

from cmdstack import __version__
from cmdstack.config import Settings
from cmdstack.config import settings as default_settings
from cmdstack.core.commands import tools, transfer
from cmdstack.core.commands.errors import InvalidArgumentError, StorageError
from cmdstack.core.commands.models import PrintStyle
from cmdstack.core.commands.query import SearchFilters
from cmdstack.core.commands.repository import CommandRepository
from cmdstack.utils.logging import configure_logging, set_invocation_id

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USER_ERROR = 1
EXIT_STORAGE_ERROR = 2

ERROR_PREFIX = "Error: "


def cmd_add(args, repo: CommandRepository) -> str:
    """Save a new command."""
    return tools.add_command(
        repo, args.command_text, alias=args.alias, tags=args.tags, note=args.note
    )


def cmd_search(args, repo: CommandRepository) -> str:
    """Search by command, alias and/or tag."""
    filters = SearchFilters(command=args.command, alias=args.alias, tag=args.tag)
    return tools.search_commands(
        repo, filters, style=args.print, limit=args.limit, fuzzy=args.fuzzy
    )


def cmd_list(args, repo: CommandRepository) -> str:
    """List commands, optionally most recently used first."""
    if args.json:
        commands = repo.list_all(args.limit, order_by_recency=args.recent)
        return transfer.dumps_commands(commands)
    return tools.list_commands(
        repo, limit=args.limit, order_by_recency=args.recent, style=args.print
    )


def cmd_show(args, repo: CommandRepository) -> str:
    """Show one command in full."""
    return tools.get_command(repo, args.id)


def cmd_update(args, repo: CommandRepository) -> str:
    """Replace the given fields of a command, keeping the rest."""
    return tools.update_command(
        repo,
        args.id,
        command=args.command,
        alias=args.alias,
        tags=args.tags,
        note=args.note,
    )


def cmd_use(args, repo: CommandRepository) -> str:
    """Mark a command as used and print it."""
    return tools.use_command(repo, args.id)


def cmd_delete(args, repo: CommandRepository) -> str:
    """Delete a command."""
    return tools.delete_command(repo, args.id)


def cmd_export(args, repo: CommandRepository) -> str:
    """Write all commands to a JSON file."""
    count = transfer.export_commands(repo, args.file)
    return f"Exported {count} command(s) to {args.file}"


def cmd_import(args, repo: CommandRepository) -> str:
    """Add the commands from a JSON file."""
    count = transfer.import_commands(repo, args.file)
    return f"Imported {count} command(s) from {args.file}"


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmdstack",
        description="cmdstack: save, search and reuse shell commands",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--db", help=f"Database path (default: {settings.db_path})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="subcommand", required=True)

    styles = [style.value for style in PrintStyle]

    # add
    p_add = subparsers.add_parser("add", help="Save a command")
    p_add.add_argument("command_text", help="The shell command to save")
    p_add.add_argument("-a", "--alias", default="", help="Display name (defaults to the command)")
    p_add.add_argument("-t", "--tags", default="", help="Comma-separated tags")
    p_add.add_argument("-n", "--note", default="", help="Free-form note")
    p_add.set_defaults(func=cmd_add)

    # search
    p_search = subparsers.add_parser("search", help="Search saved commands")
    p_search.add_argument("-c", "--command", default="", help="Search by command")
    p_search.add_argument("-a", "--alias", default="", help="Search by alias")
    p_search.add_argument("-t", "--tag", default="", help="Search by tag")
    p_search.add_argument("-p", "--print", choices=styles, default=settings.print_style.value,
                          help="How matches are shown")
    p_search.add_argument("-l", "--limit", type=int, default=settings.display_limit,
                          help="Max matches to show")
    p_search.add_argument("--fuzzy", action="store_true",
                          help="Query by the first filter, then fuzzy-match the others")
    p_search.set_defaults(func=cmd_search)

    # list
    p_list = subparsers.add_parser("list", help="List saved commands")
    p_list.add_argument("-l", "--limit", type=int, default=settings.display_limit,
                        help="Max commands to show")
    p_list.add_argument("-r", "--recent", action="store_true",
                        help="Most recently used first")
    p_list.add_argument("-p", "--print", choices=styles, default=settings.print_style.value,
                        help="How commands are shown")
    p_list.add_argument("--json", action="store_true", help="Print as JSON")
    p_list.set_defaults(func=cmd_list)

    # show
    p_show = subparsers.add_parser("show", help="Show one command")
    p_show.add_argument("id", type=int, help="Command id")
    p_show.set_defaults(func=cmd_show)

    # update
    p_update = subparsers.add_parser("update", help="Update a command")
    p_update.add_argument("id", type=int, help="Command id")
    p_update.add_argument("--command", help="New command text")
    p_update.add_argument("--alias", help="New alias")
    p_update.add_argument("--tags", help="New tags")
    p_update.add_argument("--note", help="New note")
    p_update.set_defaults(func=cmd_update)

    # use
    p_use = subparsers.add_parser("use", help="Print a command and mark it as used")
    p_use.add_argument("id", type=int, help="Command id")
    p_use.set_defaults(func=cmd_use)

    # delete
    p_delete = subparsers.add_parser("delete", help="Delete a command")
    p_delete.add_argument("id", type=int, help="Command id")
    p_delete.set_defaults(func=cmd_delete)

    # export / import
    p_export = subparsers.add_parser("export", help="Export commands to JSON")
    p_export.add_argument("file", help="Destination .json file")
    p_export.set_defaults(func=cmd_export)

    p_import = subparsers.add_parser("import", help="Import commands from JSON")
    p_import.add_argument("file", help="Source .json file")
    p_import.set_defaults(func=cmd_import)

    return parser


def main(argv: Sequence[str] | None = None, settings: Settings | None = None) -> int:
    settings = settings or default_settings
    args = build_parser(settings).parse_args(argv)

    configure_logging(
        logging.DEBUG if args.verbose else settings.log_level,
        json_format=settings.log_json,
    )
    set_invocation_id(uuid.uuid4().hex[:8])
    logger.debug("Running %s", args.subcommand)

    try:
        with CommandRepository(db_path=args.db or settings.db_path) as repo:
            output = args.func(args, repo)
    except InvalidArgumentError as e:
        print(f"{ERROR_PREFIX}{e}", file=sys.stderr)
        return EXIT_USER_ERROR
    except StorageError as e:
        logger.error("Aborting %s: %s", args.subcommand, e)
        print(f"{ERROR_PREFIX}{e}", file=sys.stderr)
        return EXIT_STORAGE_ERROR

    if output.startswith(ERROR_PREFIX):
        print(output, file=sys.stderr)
        return EXIT_USER_ERROR

    print(output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
