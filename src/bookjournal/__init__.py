"""Reading journal for academic Japanese books."""

__version__ = "0.1.0"
