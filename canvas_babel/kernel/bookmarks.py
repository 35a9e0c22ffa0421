import json
import logging
import os
import threading
from dataclasses import dataclass
from typing import List, Optional

from .addressing import canonical_key
from .errors import CollaboratorError

logger = logging.getLogger(__name__)


@dataclass
class Bookmark:
    id: str
    sector: str
    index: int
    is_uploaded: bool = False
    content: Optional[str] = None

    def to_dict(self):
        return {
            "id": self.id,
            "sectorId": self.sector,
            "canvasIndex": self.index,
            "isUploaded": self.is_uploaded,
            "base64Data": self.content,
        }

    @staticmethod
    def from_dict(d: dict) -> "Bookmark":
        sector, index = d["sectorId"], int(d["canvasIndex"])
        return Bookmark(
            id=d.get("id") or canonical_key(sector, index),
            sector=sector,
            index=index,
            is_uploaded=bool(d.get("isUploaded")),
            content=d.get("base64Data"),
        )


class BookmarkStore:
    """
    JSON file of bookmarked canvases, keyed by canonical key.
    - load: unreadable file -> logged, empty list
    - save: write failure -> CollaboratorError
    - toggle: add if absent, remove if present
    One store is shared by all requests; mutations hold `_lock`.
    """
    def __init__(self, path: str):
        self.path = path
        self.bookmarks: List[Bookmark] = []
        self._lock = threading.RLock()

    def load(self) -> List[Bookmark]:
        with self._lock:
            if not os.path.isfile(self.path):
                self.bookmarks = []
                return self.bookmarks
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    self.bookmarks = [Bookmark.from_dict(d) for d in json.load(f)]
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.error(f"Failed to load bookmarks from {self.path}: {e}")
                self.bookmarks = []
            return self.bookmarks

    def save(self):
        with self._lock:
            try:
                with open(self.path, "w", encoding="utf-8") as f:
                    json.dump([b.to_dict() for b in self.bookmarks], f, ensure_ascii=False, indent=2)
            except OSError as e:
                logger.error(f"Failed to save bookmarks to {self.path}: {e}")
                raise CollaboratorError("Could not save bookmarks.") from e
            return self.path

    def find(self, key: str) -> int:
        for i, b in enumerate(self.bookmarks):
            if b.id == key:
                return i
        return -1

    def is_bookmarked(self, key: str) -> bool:
        with self._lock:
            return self.find(key) > -1

    def snapshot(self) -> List[Bookmark]:
        with self._lock:
            return list(self.bookmarks)

    def toggle(self, sector: str, index: int, content: Optional[str] = None) -> bool:
        """Returns True if the canvas is bookmarked afterwards."""
        with self._lock:
            key = canonical_key(sector, index)
            i = self.find(key)
            if i > -1:
                removed = self.bookmarks.pop(i)
                try:
                    self.save()
                except CollaboratorError:
                    self.bookmarks.insert(i, removed)
                    raise
                return False
            self.bookmarks.append(Bookmark(key, sector, index, content is not None, content))
            try:
                self.save()
            except CollaboratorError:
                self.bookmarks.pop()
                raise
            return True
