"""Command-line interface for SVCATALOG."""
