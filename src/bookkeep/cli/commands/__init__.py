"""CLI commands for bookkeep."""
