"""Shared pytest fixtures, registered through ``pytest_plugins``."""
