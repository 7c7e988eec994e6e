"""Main entry point for ``python -m bookjournal``."""

from bookjournal.cli import main

if __name__ == "__main__":
    main()
