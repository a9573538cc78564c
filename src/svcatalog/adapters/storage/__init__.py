"""ServiceStorage adapters: relational (SQLAlchemy) and in-memory."""

from .memory import InMemoryCatalogData, InMemoryServiceStore
from .sqlalchemy_store import SqlAlchemyServiceStore

__all__ = [
    "InMemoryCatalogData",
    "InMemoryServiceStore",
    "SqlAlchemyServiceStore",
]
