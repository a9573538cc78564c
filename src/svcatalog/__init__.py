"""SVCATALOG

A catalog of named services and their immutable versions. Services are updated
by appending version-stamped rows, never by mutating them, so concurrent
writers are arbitrated by the database's uniqueness constraints alone.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
