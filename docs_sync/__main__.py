"""Main entry point for docs-sync."""
from .sync.cli import main


if __name__ == "__main__":
    main()
