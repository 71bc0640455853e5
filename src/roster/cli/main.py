"""Main CLI entry point for roster."""  # pragma: no cover

from roster.cli.app import app  # pragma: no cover

# Register commands
from roster.cli.commands import config, scan  # pragma: no cover

__all__ = ["config", "scan"]  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
