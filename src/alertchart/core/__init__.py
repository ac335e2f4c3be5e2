"""Core helpers shared across alertchart."""
