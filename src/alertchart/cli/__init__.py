"""Command line interface for alertchart."""
