"""
Tool registry and dispatcher.

Tools are declared with a pydantic argument model. ``call()`` validates the raw
argument mapping once, hands the typed model to the handler and converts every
outcome, including handler exceptions, into a ToolResult.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, ValidationError

from core.errors import DuplicateToolError
from logging_config import get_logger
from models import ToolResult, ToolSummary

logger = get_logger(__name__)

ToolHandler = Callable[[Any], Awaitable[ToolResult]]

_TYPE_NAMES = {
    "string_type": "string",
    "int_type": "number",
    "float_type": "number",
    "bool_type": "boolean",
    "int_from_float": "number",
}


class ToolArgs(BaseModel):
    """Base for tool argument models.

    Strict mode rejects string/number/boolean coercion; unknown keys are ignored
    so older servers accept newer clients.
    """

    model_config = ConfigDict(strict=True, extra="ignore")


@dataclass
class ToolDescriptor:
    name: str
    description: str
    args_model: Type[BaseModel]
    handler: ToolHandler

    @property
    def input_schema(self) -> Dict[str, Any]:
        schema = self.args_model.model_json_schema()
        schema.pop("title", None)
        return schema

    def summary(self) -> ToolSummary:
        return ToolSummary(
            name=self.name, description=self.description, input_schema=self.input_schema
        )


def describe_validation_error(exc: ValidationError) -> str:
    """Turn a pydantic ValidationError into one readable sentence per field."""
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "arguments"
        if error["type"] == "missing":
            problems.append(f"missing required parameter: {field}")
        elif error["type"] in _TYPE_NAMES:
            problems.append(
                f"invalid type for parameter '{field}': expected {_TYPE_NAMES[error['type']]}"
            )
        else:
            problems.append(f"invalid value for parameter '{field}': {error['msg']}")
    return "; ".join(problems)


class ToolRegistry:
    """Name -> ToolDescriptor map, kept in registration order."""

    def __init__(self):
        self._tools: Dict[str, ToolDescriptor] = {}

    def register(self, descriptor: ToolDescriptor) -> ToolDescriptor:
        if descriptor.name in self._tools:
            raise DuplicateToolError(descriptor.name)
        self._tools[descriptor.name] = descriptor
        logger.info(f"Registered tool: {descriptor.name}")
        return descriptor

    def tool(self, name: str, description: str, args_model: Type[BaseModel]):
        """Decorator form of ``register``."""

        def decorator(handler: ToolHandler) -> ToolHandler:
            self.register(
                ToolDescriptor(
                    name=name,
                    description=description,
                    args_model=args_model,
                    handler=handler,
                )
            )
            return handler

        return decorator

    def get(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def list(self) -> List[ToolSummary]:
        return [descriptor.summary() for descriptor in self._tools.values()]

    def names(self) -> List[str]:
        return list(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """Dispatch a tool call. Never raises."""
        descriptor = self._tools.get(name)
        if descriptor is None:
            logger.warning(f"Call to unknown tool: {name}")
            return ToolResult.error(f"Unknown tool: `{name}`")

        raw_args = dict(arguments or {})
        try:
            args = descriptor.args_model.model_validate(raw_args)
        except ValidationError as e:
            detail = describe_validation_error(e)
            logger.info(f"Rejected arguments for {name}: {detail}")
            return ToolResult.error(f"Invalid arguments for `{name}`: {detail}")

        logger.info(f"Calling tool {name} with {args.model_dump()}")
        try:
            result = await descriptor.handler(args)
        except Exception as e:
            logger.exception(f"Tool {name} failed")
            return ToolResult.error(f"Error running `{name}`: {e}")

        if not isinstance(result, ToolResult):
            logger.error(f"Tool {name} returned {type(result).__name__}, not ToolResult")
            return ToolResult.error(f"Error running `{name}`: handler returned no result")
        return result
