"""Packaged Alembic migration scripts for the catalog schema."""
