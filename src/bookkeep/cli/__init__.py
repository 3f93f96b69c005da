"""Command-line interface for bookkeep."""
