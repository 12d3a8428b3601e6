"""cmdstack: a personal command bookmark store."""

__version__ = "0.1.0"
