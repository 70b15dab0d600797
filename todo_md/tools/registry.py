from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Type,
    TypedDict,
    cast,
    get_args,
    get_origin,
)

from pydantic import BaseModel

from ..commands import CommandResult

CommandHandler = Callable[[str], Awaitable[CommandResult]]


class ToolSpec(TypedDict):
    """JSON schema-like tool definition."""

    name: str
    description: str
    parameters: Dict[str, Any]


@dataclass
class RegisteredCommand:
    name: str
    description: str
    handler: CommandHandler
    accepts_args: bool


@dataclass
class RegisteredTool:
    name: str
    description: str
    parameters: Dict[str, Any]
    func: Callable[..., Any]
    is_async: bool
    params_model: Optional[Type[BaseModel]] = None


class Registry:
    """Slash commands and structured tools exposed to a host.

    Tools infer a JSON schema from type hints, or take it from a pydantic
    ``params_model`` which is then also used to validate arguments.
    """

    def __init__(self) -> None:
        self.commands: Dict[str, RegisteredCommand] = {}
        self.tools: Dict[str, RegisteredTool] = {}

    def command(
        self,
        name: str,
        description: str = "",
        *,
        accepts_args: bool = True,
    ) -> Callable[[CommandHandler], CommandHandler]:
        def decorator(handler: CommandHandler) -> CommandHandler:
            self.commands[name] = RegisteredCommand(
                name=name,
                description=description or inspect.getdoc(handler) or "",
                handler=handler,
                accepts_args=accepts_args,
            )
            return handler

        return decorator

    def tool(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        params_model: Optional[Type[BaseModel]] = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            tool_name = name or func.__name__
            desc = description or inspect.getdoc(func) or ""
            if params_model is not None:
                schema = cast(Dict[str, Any], params_model.model_json_schema())
            else:
                schema = _signature_schema(func)

            self.tools[tool_name] = RegisteredTool(
                name=tool_name,
                description=desc,
                parameters=schema,
                func=func,
                is_async=inspect.iscoroutinefunction(func),
                params_model=params_model,
            )
            return func

        return decorator

    def get_tool_specs(self) -> List[ToolSpec]:
        return [
            {"name": t.name, "description": t.description, "parameters": t.parameters}
            for t in self.tools.values()
        ]

    async def execute_tool(self, name: str, arguments: Dict[str, Any]) -> Any:
        if name not in self.tools:
            raise KeyError(f"Unknown tool: {name}")
        registered = self.tools[name]
        if registered.params_model is not None:
            arguments = registered.params_model.model_validate(arguments).model_dump()
        if registered.is_async:
            return await registered.func(**arguments)

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: registered.func(**arguments))

    async def run_command(self, name: str, args: str = "") -> CommandResult:
        if name not in self.commands:
            raise KeyError(f"Unknown command: {name}")
        registered = self.commands[name]
        return await registered.handler(args if registered.accepts_args else "")


def _signature_schema(func: Callable[..., Any]) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": {}, "required": []}
    for pname, param in inspect.signature(func).parameters.items():
        if pname == "self":
            continue
        schema["properties"][pname] = _annotation_to_schema(param.annotation)
        if param.default is inspect.Parameter.empty:
            schema["required"].append(pname)
    return schema


def _annotation_to_schema(ann: Any) -> Dict[str, Any]:
    if isinstance(ann, type) and issubclass(ann, BaseModel):
        return cast(Dict[str, Any], ann.model_json_schema())

    origin = get_origin(ann)
    if origin is list or origin is List:
        (arg,) = get_args(ann) if get_args(ann) else (str,)
        return {"type": "array", "items": _annotation_to_schema(arg)}
    if origin is dict or origin is Dict:
        return {"type": "object"}

    mapping = {int: "integer", float: "number", str: "string", bool: "boolean"}
    if ann in mapping:
        return {"type": mapping[ann]}

    return {"type": "string"}
