"""Errors raised by catalog storage and transports.

Callers only ever see these types; adapters translate engine-specific signals
(constraint violations, zero affected rows, HTTP status codes) into them.
Any other failure (connectivity, corruption) propagates unmodified.
"""


class CatalogError(Exception):
    """Base class for all catalog errors."""


class InvalidStateError(CatalogError):
    """A required field is missing or malformed, or a page option is invalid.

    Always caller-correctable; never retried.
    """


class ConflictError(CatalogError):
    """A concurrent writer already claimed the slot being written.

    Raised when the ``(id, version)`` of a service or the ``(service_id, name)``
    of a version already exists. Callers may reload the current service and
    retry with an incremented version; the store never retries on its own.
    """

    def __init__(
        self, message: str, *, kind: str | None = None, key: str | None = None
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.key = key

    @classmethod
    def for_key(cls, kind: str, key: str) -> "ConflictError":
        """Build the standard conflict error for a ``kind`` and its unique key."""
        return cls(f"{kind} ({key}) already exists", kind=kind, key=key)


class NoSuchServiceError(CatalogError):
    """The referenced service does not exist, or not at the expected version."""

    def __init__(self, service_id: str, message: str | None = None) -> None:
        if message is None:
            message = f"No such service [{service_id}]"
        super().__init__(message)
        self.service_id = service_id
