"""Command-line interface for alfred."""
