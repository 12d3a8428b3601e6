"""Command line interface for cmdstack."""

from cmdstack.interfaces.cli.main import main

__all__ = ["main"]
