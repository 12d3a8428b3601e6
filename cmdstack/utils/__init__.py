"""Utility helpers shared across cmdstack."""

from cmdstack.utils.logging import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
