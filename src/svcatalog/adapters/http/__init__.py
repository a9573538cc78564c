"""HTTP surface of the catalog: FastAPI server, httpx client, wire models."""

from .client import HttpTransport
from .server import create_app

__all__ = ["HttpTransport", "create_app"]
