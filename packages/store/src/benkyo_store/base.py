"""Abstract store interface.

Every collection (words, notes, mistake sets, daily stats, review progress)
is one JSON value in a named slot. Backends (in-memory, JSON file, SQLite)
implement this interface; the repositories and the CLI depend on BaseStore,
not on a concrete backend, so backends are swappable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseStore(ABC):
    """Pluggable slot persistence.

    Writes are whole-value replacements that are complete when the call
    returns. There is no transaction across slots.
    """

    @abstractmethod
    def get(self, slot: str) -> Any | None:
        """Return the decoded value stored in ``slot``.

        Returns None if the slot is absent or its payload cannot be decoded.
        Never raises for bad data.
        """

    @abstractmethod
    def put(self, slot: str, value: Any) -> None:
        """Replace the value stored in ``slot``."""

    @abstractmethod
    def delete(self, slot: str) -> None:
        """Remove ``slot``. Deleting an absent slot is not an error."""

    @abstractmethod
    def slots(self) -> list[str]:
        """Return the names of all stored slots."""

    def close(self) -> None:
        """Release any resources held by the store (connections, file handles).

        Optional: subclasses that need cleanup should override this.
        Default is a no-op so callers can always call close() safely.
        """
