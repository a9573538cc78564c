"""Concrete adapters: relational storage, in-memory storage, HTTP, id generators."""
