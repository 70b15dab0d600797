"""Append-only JSONL memory log that records TODO changes as notes."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class MemoryItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    kind: str = "note"
    text: str
    created_at: str = Field(default_factory=_now_iso, alias="createdAt")
    tags: List[str] = Field(default_factory=list)


class JsonlMemoryStore:
    """One JSON object per line; entries are only ever appended."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def add(self, item: MemoryItem) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(item.model_dump_json(by_alias=True))
            f.write("\n")

    def load(self) -> List[MemoryItem]:
        if not self.path.exists():
            return []
        items: List[MemoryItem] = []
        with open(self.path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    items.append(MemoryItem.model_validate(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    logger.warning(f"Skipping malformed memory entry {self.path}:{lineno}: {e}")
        return items


class Notifier(ABC):
    @abstractmethod
    async def note(self, text: str) -> None:
        """Record a freeform note about a TODO change. Must not raise."""


class NullNotifier(Notifier):
    async def note(self, text: str) -> None:
        return None


class BrainLog(Notifier):
    """Best-effort notifier writing ``TODO: ...`` notes to a memory store."""

    def __init__(self, store: JsonlMemoryStore) -> None:
        self.store = store

    async def note(self, text: str) -> None:
        item = MemoryItem(kind="note", text=f"TODO: {text}", tags=["todo"])
        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self.store.add, item)
        except Exception as e:
            logger.warning(f"Failed to write memory note to {self.store.path}: {e}")
