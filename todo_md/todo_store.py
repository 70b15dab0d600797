from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

DEFAULT_TODO_TEMPLATE = "# TODO\n\n- [ ] My first task\n"


class TodoStoreError(RuntimeError):
    """Raised when the TODO document cannot be created, read or written."""

    def __init__(self, message: str, *, path: Path) -> None:
        self.path = path
        super().__init__(message)


class DocumentStore(ABC):
    """Synchronous storage for a single checklist document."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the document."""

    @abstractmethod
    def ensure(self) -> bool:
        """Create the document with default content if missing; return True if created."""

    @abstractmethod
    def read(self) -> str:
        """Return the full document text."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Replace the document with ``text``."""


class TodoFileStore(DocumentStore):
    """Markdown TODO file on the local filesystem."""

    def __init__(self, path: Union[str, Path], template: str = DEFAULT_TODO_TEMPLATE):
        self.path = Path(path)
        self.template = template

    @property
    def location(self) -> str:
        return str(self.path)

    def ensure(self) -> bool:
        if self.path.exists():
            return False
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(self.template, encoding="utf-8")
        except OSError as exc:
            raise TodoStoreError(
                f"Failed to create {self.path}: {exc}", path=self.path
            ) from exc
        logger.info(f"Created TODO file {self.path}")
        return True

    def read(self) -> str:
        """Return the document; undecodable bytes become U+FFFD."""
        self.ensure()
        try:
            return self.path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise TodoStoreError(
                f"Failed to read {self.path}: {exc}", path=self.path
            ) from exc

    def write(self, text: str) -> None:
        try:
            self.path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise TodoStoreError(
                f"Failed to write {self.path}: {exc}", path=self.path
            ) from exc
        logger.debug(f"Wrote {len(text)} characters to {self.path}")
