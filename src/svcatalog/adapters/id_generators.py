"""ID generators for service ids."""

import uuid

from svcatalog.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods


class UUIDv1Generator(IdGenerator):
    """Time-based UUID generator.

    UUIDv1 values embed a timestamp and the host's node id, so ids generated
    on one server sort roughly by creation time.
    """

    def new_id(self) -> str:
        """Generate a new UUID."""
        return str(uuid.uuid1())


class UUIDv4Generator(IdGenerator):
    """Random UUID generator.

    UUIDv4 values are not ordered in any way.
    """

    def new_id(self) -> str:
        """Generate a new UUID."""
        return str(uuid.uuid4())


class SimpleIdGenerator(IdGenerator):
    """A simple ID generator that produces sequential ids.

    Note:
        Not suitable for production use; primarily for testing and demos.
    """

    def __init__(self, prefix: str = "svc-", length: int = 6) -> None:
        self._counter = 0
        self._prefix = prefix
        self._length = length

    def new_id(self) -> str:
        """Generate a new unique identifier."""
        self._counter += 1
        return f"{self._prefix}{self._counter:0{self._length}d}"
