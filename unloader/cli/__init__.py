"""Command-line interface for unloader."""
