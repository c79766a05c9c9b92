"""Command-line interface for markcli."""
