from __future__ import annotations

from .registry import (
    CommandHandler,
    RegisteredCommand,
    RegisteredTool,
    Registry,
    ToolSpec,
    _annotation_to_schema,
)
from .todo import StatusParams, build_notifier, register

__all__ = [
    "CommandHandler",
    "RegisteredCommand",
    "RegisteredTool",
    "Registry",
    "ToolSpec",
    "_annotation_to_schema",
    "StatusParams",
    "build_notifier",
    "register",
]
