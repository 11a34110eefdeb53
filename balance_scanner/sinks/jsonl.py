"""
Append-only JSON Lines store for hits.

One record per line, flushed on every write so a tailing reader sees it
immediately. No rotation or compaction.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Union

from ..core.errors import SinkError
from .base import HitRecord

logger = logging.getLogger(__name__)


class JsonlHitStore:
    """Persist hits to a JSONL file. Parent directories are created on first write."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def record(self, hit: HitRecord) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(hit.to_json() + "\n")
                f.flush()
        except OSError as exc:
            raise SinkError(f"Cannot append hit to {self._path}: {exc}") from exc
        logger.info("Hit saved to %s", self._path)

    def iter_lines(self) -> Iterator[str]:
        """Stream stored records (raw JSON lines) without loading the whole file."""
        if not self._path.exists():
            return
        with open(self._path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    yield line
