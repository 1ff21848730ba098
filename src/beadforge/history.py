"""Bounded linear undo/redo history.

Recording a new entry after some undos discards the undone branch.  Once
the limit is exceeded the oldest entry is evicted.  The manager stores the
snapshots it is handed as-is; callers must pass copies, never live state.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from beadforge.errors import NoHistoryError

T = TypeVar("T")

DEFAULT_HISTORY_LIMIT = 100


@dataclass(frozen=True)
class HistoryEntry(Generic[T]):
    """One recorded mutation.

    Attributes:
        before: Snapshot taken before the mutation.
        after: Snapshot taken after the mutation.
        changed: Items reported as changed (e.g. cells), informational.
        label: Short description of the operation.
        timestamp: Epoch seconds when recorded.
    """

    before: T
    after: T
    changed: tuple[Any, ...] = ()
    label: str = ""
    timestamp: float = field(default_factory=time.time)


class HistoryManager(Generic[T]):
    """Undo/redo stack with a cursor over recorded entries.

    Args:
        limit: Maximum number of entries kept; ``None`` for unbounded.

    Raises:
        ValueError: If *limit* is smaller than 1.
    """

    def __init__(self, limit: int | None = DEFAULT_HISTORY_LIMIT) -> None:
        if limit is not None and limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self._limit = limit
        self._entries: list[HistoryEntry[T]] = []
        self._index = -1  # last applied entry

    @property
    def limit(self) -> int | None:
        return self._limit

    @property
    def can_undo(self) -> bool:
        return self._index >= 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    @property
    def entries(self) -> list[HistoryEntry[T]]:
        return list(self._entries)

    @property
    def undo_depth(self) -> int:
        return self._index + 1

    @property
    def redo_depth(self) -> int:
        return len(self._entries) - 1 - self._index

    def __len__(self) -> int:
        return len(self._entries)

    def record(
        self, before: T, after: T, changed: Any = (), label: str = ""
    ) -> HistoryEntry[T]:
        """Append an entry, dropping any redo branch and evicting past the limit."""
        del self._entries[self._index + 1 :]
        entry = HistoryEntry(before=before, after=after, changed=tuple(changed), label=label)
        self._entries.append(entry)
        if self._limit is not None and len(self._entries) > self._limit:
            self._entries.pop(0)
        self._index = len(self._entries) - 1
        return entry

    def undo(self) -> HistoryEntry[T]:
        """Step back; the caller restores ``entry.before``.

        Raises:
            NoHistoryError: If there is nothing to undo.
        """
        if not self.can_undo:
            raise NoHistoryError("Nothing to undo")
        entry = self._entries[self._index]
        self._index -= 1
        return entry

    def redo(self) -> HistoryEntry[T]:
        """Step forward; the caller re-applies ``entry.after``.

        Raises:
            NoHistoryError: If there is nothing to redo.
        """
        if not self.can_redo:
            raise NoHistoryError("Nothing to redo")
        self._index += 1
        return self._entries[self._index]

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1
