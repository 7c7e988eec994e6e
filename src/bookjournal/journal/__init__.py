"""Reading journal module."""

from .manager import JournalManager

__all__ = ["JournalManager"]
