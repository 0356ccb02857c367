"""CLI commands, one per module."""
