"""Relational plumbing shared by the SQL storage adapter and migrations."""
