"""Ports for the service catalog.

Framework-free abstract classes. Do NOT import from adapters, bootstrap, or
entrypoints here.
"""

from .id_generator import IdGenerator
from .storage import ServiceStorage
from .transport import Transport

__all__ = ["IdGenerator", "ServiceStorage", "Transport"]
