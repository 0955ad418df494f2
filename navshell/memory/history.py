"""
Command history with up/down recall.
"""

from typing import Iterable, List, Optional


class CommandHistory:
    """Deduplicated, capped command log with a recall cursor.

    The cursor is an offset from the most recent entry; -1 means the user is
    not browsing. Editing the input while browsing leaves the cursor alone,
    so a recalled command can be tweaked and browsing can continue from
    where it was.
    """

    def __init__(self, max_size: int = 1000, entries: Optional[Iterable[str]] = None):
        self.max_size = max_size
        self._entries: List[str] = []
        self._cursor = -1
        self._live_input = ""

        for entry in entries or []:
            self._append(entry)

    @property
    def entries(self) -> List[str]:
        """Entries from oldest to most recent."""
        return list(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def browsing(self) -> bool:
        return self._cursor != -1

    def _append(self, line: str) -> None:
        if line in self._entries:
            self._entries.remove(line)
        self._entries.append(line)
        if len(self._entries) > self.max_size:
            del self._entries[: len(self._entries) - self.max_size]

    def record(self, line: str) -> None:
        """
        Add a submitted line as the most recent entry.

        An equal entry already present is moved rather than duplicated, and
        the oldest entry is evicted once the cap is exceeded.
        """
        if not line.strip():
            return
        self._append(line)
        self.reset()

    def reset(self) -> None:
        """Stop browsing."""
        self._cursor = -1
        self._live_input = ""

    def recall_previous(self, live_input: str) -> str:
        """
        Step toward older entries.

        Args:
            live_input: Current input line; saved when browsing starts

        Returns:
            Entry at the new cursor position (clamped at the oldest)
        """
        if not self._entries:
            return live_input

        if self._cursor == -1:
            self._live_input = live_input

        self._cursor = min(self._cursor + 1, len(self._entries) - 1)
        return self._entries[-1 - self._cursor]

    def recall_next(self) -> Optional[str]:
        """
        Step toward newer entries.

        Returns:
            The newer entry, the saved live input when stepping past the most
            recent entry, or None when not browsing
        """
        if self._cursor == -1:
            return None

        if self._cursor == 0:
            live_input = self._live_input
            self.reset()
            return live_input

        self._cursor -= 1
        return self._entries[-1 - self._cursor]

    def recent(self, n: int = 10) -> List[str]:
        """Get the n most recent entries, oldest first."""
        if n <= 0:
            return []
        return self._entries[-n:]

    def clear(self) -> None:
        self._entries.clear()
        self.reset()
