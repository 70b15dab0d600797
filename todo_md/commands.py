from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .checklist import TodoItem, add_todo, edit_todo, mark_done, parse_todos, remove_todo
from .memory_log import Notifier, NullNotifier
from .todo_store import DocumentStore

logger = logging.getLogger(__name__)

DONE_USAGE = "Usage: /todo-done <index> (see /todo-list)"
EDIT_USAGE = "Usage: /todo-edit <index> <new text> (see /todo-list)"
REMOVE_USAGE = "Usage: /todo-remove <index> (see /todo-list)"
ADD_USAGE = "Usage: /todo-add <text>"


@dataclass
class CommandResult:
    text: str


class TodoStatus(BaseModel):
    """Structured status; serialized with camelCase keys for hosts."""

    model_config = ConfigDict(populate_by_name=True)

    todo_file: str = Field(alias="todoFile")
    open_count: int = Field(alias="openCount")
    done_count: int = Field(alias="doneCount")
    open: List[str]


def _parse_index(raw: str) -> Optional[int]:
    try:
        idx = int(raw)
    except ValueError:
        return None
    return idx if idx >= 1 else None


def _open_items(document: str) -> List[TodoItem]:
    return [t for t in parse_todos(document) if not t.done]


class TodoCommands:
    """User-facing TODO commands over an injected store and notifier.

    Each handler reads a fresh document, selects items by 1-based index into
    the currently open items, writes the result and then notes the change.
    Storage errors propagate; notifier failures never do.
    """

    def __init__(
        self,
        store: DocumentStore,
        notifier: Optional[Notifier] = None,
        *,
        max_list_items: int = 30,
        section_header: Optional[str] = None,
    ) -> None:
        self.store = store
        self.notifier = notifier or NullNotifier()
        self.max_list_items = max_list_items
        self.section_header = section_header

    def _select_open(self, document: str, idx: int) -> Optional[TodoItem]:
        open_items = _open_items(document)
        if idx > len(open_items):
            return None
        return open_items[idx - 1]

    async def todo_list(self, args: str = "") -> CommandResult:
        todos = _open_items(self.store.read())
        top = todos[: self.max_list_items]
        if not top:
            return CommandResult("No open TODOs.")
        lines = [f"{i}. {t.text}" for i, t in enumerate(top, start=1)]
        return CommandResult(f"Open TODOs ({len(todos)}):\n" + "\n".join(lines))

    async def todo_add(self, args: str = "") -> CommandResult:
        text = args.strip()
        if not text:
            return CommandResult(ADD_USAGE)

        document = self.store.read()
        self.store.write(add_todo(document, text, self.section_header))
        logger.info(f"Added TODO: {text}")

        await self.notifier.note(f"added - {text}")
        return CommandResult(f"Added TODO: {text}")

    async def todo_done(self, args: str = "") -> CommandResult:
        idx = _parse_index(args.strip())
        if idx is None:
            return CommandResult(DONE_USAGE)

        document = self.store.read()
        item = self._select_open(document, idx)
        if item is None:
            return CommandResult(f"No open TODO at index {idx}.")

        self.store.write(mark_done(document, item))
        logger.info(f"Marked TODO done: {item.text}")

        await self.notifier.note(f"done - {item.text}")
        return CommandResult(f"Done: {item.text}")

    async def todo_edit(self, args: str = "") -> CommandResult:
        raw = args.strip()
        index_part, sep, rest = raw.partition(" ")
        if not raw or not sep:
            return CommandResult(EDIT_USAGE)

        idx = _parse_index(index_part)
        new_text = rest.strip()
        if idx is None or not new_text:
            return CommandResult(EDIT_USAGE)

        document = self.store.read()
        item = self._select_open(document, idx)
        if item is None:
            return CommandResult(f"No open TODO at index {idx}.")

        old_text = item.text
        self.store.write(edit_todo(document, item, new_text))
        logger.info(f"Edited TODO #{idx}: {old_text!r} -> {new_text!r}")

        await self.notifier.note(f'edited - "{old_text}" -> "{new_text}"')
        return CommandResult(f'Edited TODO #{idx}: "{old_text}" -> "{new_text}"')

    async def todo_remove(self, args: str = "") -> CommandResult:
        idx = _parse_index(args.strip())
        if idx is None:
            return CommandResult(REMOVE_USAGE)

        document = self.store.read()
        item = self._select_open(document, idx)
        if item is None:
            return CommandResult(f"No open TODO at index {idx}.")

        self.store.write(remove_todo(document, item))
        logger.info(f"Removed TODO: {item.text}")

        await self.notifier.note(f"removed - {item.text}")
        return CommandResult(f"Removed TODO: {item.text}")

    async def todo_status(self, limit: int = 50) -> Dict[str, Any]:
        items = parse_todos(self.store.read())
        open_items = [t for t in items if not t.done]
        status = TodoStatus(
            todo_file=self.store.location,
            open_count=len(open_items),
            done_count=len(items) - len(open_items),
            open=[t.text for t in open_items[:limit]],
        )
        return status.model_dump(by_alias=True)
