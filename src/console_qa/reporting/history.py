"""
Bounded run history: newest first, capped right after every insertion.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator, List, Optional

from pydantic import ValidationError

from ..models.run_snapshot import RunHistoryEntry


__all__ = ["MAX_HISTORY", "RunHistory"]

logger = logging.getLogger(__name__)


MAX_HISTORY = 100


class RunHistory:
    """
    Ordered, capped sequence of past runs (most recent first).

    Attributes:
        limit: Maximum number of retained entries.
    """

    def __init__(
        self,
        entries: Optional[List[RunHistoryEntry]] = None,
        limit: int = MAX_HISTORY,
    ) -> None:
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.limit = limit
        self._entries: List[RunHistoryEntry] = list(entries or [])[:limit]

    def insert(self, entry: RunHistoryEntry) -> None:
        """Prepend ``entry`` and discard anything beyond the limit."""
        self._entries.insert(0, entry)
        del self._entries[self.limit:]

    @property
    def entries(self) -> List[RunHistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RunHistoryEntry]:
        return iter(list(self._entries))

    @classmethod
    def load(cls, path: Path, limit: int = MAX_HISTORY) -> "RunHistory":
        """
        Read history from disk.

        A missing, unreadable or malformed file yields an empty history;
        individually invalid entries are dropped.
        """
        if not path.exists():
            return cls(limit=limit)

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable history file {path}: {e}")
            return cls(limit=limit)

        if not isinstance(raw, list):
            logger.warning(f"Ignoring history file {path}: expected a JSON array")
            return cls(limit=limit)

        entries = []
        for index, item in enumerate(raw):
            try:
                entries.append(RunHistoryEntry.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Dropping invalid history entry #{index}: {e.error_count()} errors")
        return cls(entries, limit=limit)

    def save(self, path: Path) -> None:
        """Overwrite ``path`` with the current entries."""
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = [entry.to_json_dict() for entry in self._entries]
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
