"""Command-line interface for roster."""
