from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..commands import TodoCommands
from ..config import TodoSettings
from ..memory_log import BrainLog, JsonlMemoryStore, Notifier, NullNotifier
from ..todo_store import DocumentStore, TodoFileStore
from .registry import Registry

logger = logging.getLogger(__name__)


class StatusParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    limit: int = Field(50, ge=1, le=200, description="Maximum open items to return")


def build_notifier(settings: TodoSettings) -> Notifier:
    if not settings.brain_log:
        return NullNotifier()
    return BrainLog(JsonlMemoryStore(settings.brain_store))


def register(
    registry: Registry,
    settings: TodoSettings,
    store: Optional[DocumentStore] = None,
    notifier: Optional[Notifier] = None,
) -> Optional[TodoCommands]:
    """Wire the TODO commands and the ``todo_status`` tool into ``registry``.

    Does nothing when the settings disable the feature.
    """
    if not settings.enabled:
        logger.info("[todo] disabled by configuration")
        return None

    store = store or TodoFileStore(settings.todo_path)
    store.ensure()
    logger.info(f"[todo] enabled. file={store.location}")

    commands = TodoCommands(
        store,
        notifier or build_notifier(settings),
        max_list_items=settings.max_list_items,
        section_header=settings.section_header,
    )

    registry.command("todo-list", "List open TODO items", accepts_args=False)(
        commands.todo_list
    )
    registry.command("todo-add", "Add a TODO item")(commands.todo_add)
    registry.command("todo-done", "Mark a TODO item done")(commands.todo_done)
    registry.command("todo-edit", "Edit a TODO item's text")(commands.todo_edit)
    registry.command("todo-remove", "Remove a TODO item")(commands.todo_remove)

    @registry.tool(
        name="todo_status",
        description="Return structured TODO status from the TODO file.",
        params_model=StatusParams,
    )
    async def todo_status(limit: int = 50) -> Dict[str, Any]:
        return await commands.todo_status(limit)

    return commands
