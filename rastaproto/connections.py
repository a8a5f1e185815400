"""An ordered collection of connections looked up by position or remote id."""

from __future__ import annotations

from typing import Generic, Iterator, Protocol, TypeVar

__all__ = ["ConnectionList"]


class _HasRemoteId(Protocol):
    remote_id: int


C = TypeVar("C", bound=_HasRemoteId)


class ConnectionList(Generic[C]):
    """Connections kept in insertion order."""

    def __init__(self) -> None:
        self._items: list[C] = []

    def add(self, connection: C) -> int:
        """Append ``connection`` and return its index."""
        self._items.append(connection)
        return len(self._items) - 1

    def remove(self, index: int) -> None:
        """Remove the connection at ``index``; an unknown index is ignored."""
        if 0 <= index < len(self._items):
            del self._items[index]

    def get(self, index: int) -> C | None:
        """Return the connection at ``index`` or None."""
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def get_by_remote(self, remote_id: int) -> C | None:
        """Return the first connection to ``remote_id`` or None."""
        index = self.index_of(remote_id)
        return None if index is None else self._items[index]

    def index_of(self, remote_id: int) -> int | None:
        """Return the index of the first connection to ``remote_id`` or None."""
        return next(
            (index for index, item in enumerate(self._items) if item.remote_id == remote_id),
            None,
        )

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[C]:
        return iter(self._items)

    def __contains__(self, connection: object) -> bool:
        return connection in self._items