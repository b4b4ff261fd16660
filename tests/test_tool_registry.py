"""Tests for the tool registry and dispatcher."""

from typing import Optional

import pytest
from pydantic import Field

from core.errors import DuplicateToolError
from core.tool_registry import ToolArgs, ToolDescriptor, ToolRegistry
from models import ToolResult


class EchoArgs(ToolArgs):
    city: str
    days: int = Field(7, ge=1, le=16)
    latitude: Optional[float] = None
    loud: bool = False


def make_registry() -> ToolRegistry:
    registry = ToolRegistry()

    @registry.tool(name="echo", description="Echo the arguments", args_model=EchoArgs)
    async def echo(args: EchoArgs) -> ToolResult:
        text = f"{args.city}:{args.days}:{args.latitude}:{args.loud}"
        return ToolResult.text(text.upper() if args.loud else text)

    @registry.tool(name="explode", description="Always fails", args_model=ToolArgs)
    async def explode(args: ToolArgs) -> ToolResult:
        raise RuntimeError("boom")

    @registry.tool(name="sloppy", description="Returns the wrong type", args_model=ToolArgs)
    async def sloppy(args: ToolArgs):
        return "not a tool result"

    return registry


class TestRegistration:
    def test_list_keeps_registration_order(self):
        registry = make_registry()
        assert [tool.name for tool in registry.list()] == ["echo", "explode", "sloppy"]

    def test_duplicate_name_raises(self):
        registry = make_registry()

        async def handler(args):
            return ToolResult.text("again")

        with pytest.raises(DuplicateToolError) as exc_info:
            registry.register(ToolDescriptor("echo", "dup", ToolArgs, handler))
        assert exc_info.value.name == "echo"
        assert len(registry) == 3

    def test_summary_carries_input_schema(self):
        summary = make_registry().list()[0]
        assert summary.description == "Echo the arguments"
        assert summary.input_schema["required"] == ["city"]
        assert summary.input_schema["properties"]["days"]["maximum"] == 16
        assert "title" not in summary.input_schema

    def test_contains_and_get(self):
        registry = make_registry()
        assert "echo" in registry
        assert registry.get("missing") is None


class TestDispatch:
    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        result = await make_registry().call("teleport", {"city": "Paris"})
        assert result.is_error
        assert result.first_text == "Unknown tool: `teleport`"

    @pytest.mark.asyncio
    async def test_defaults_applied(self):
        result = await make_registry().call("echo", {"city": "Paris"})
        assert not result.is_error
        assert result.first_text == "Paris:7:None:False"

    @pytest.mark.asyncio
    async def test_none_arguments_treated_as_empty(self):
        result = await make_registry().call("echo", None)
        assert result.is_error
        assert "missing required parameter: city" in result.first_text

    @pytest.mark.asyncio
    async def test_wrong_type_names_parameter_and_type(self):
        result = await make_registry().call("echo", {"city": 42})
        assert result.is_error
        assert "invalid type for parameter 'city': expected string" in result.first_text

    @pytest.mark.asyncio
    async def test_numeric_string_not_coerced(self):
        result = await make_registry().call("echo", {"city": "Paris", "days": "3"})
        assert result.is_error
        assert "invalid type for parameter 'days': expected number" in result.first_text

    @pytest.mark.asyncio
    async def test_boolean_not_accepted_as_number(self):
        result = await make_registry().call("echo", {"city": "Paris", "days": True})
        assert result.is_error
        assert "'days'" in result.first_text

    @pytest.mark.asyncio
    async def test_int_accepted_for_float(self):
        result = await make_registry().call("echo", {"city": "Paris", "latitude": 51})
        assert not result.is_error
        assert result.first_text == "Paris:7:51.0:False"

    @pytest.mark.asyncio
    async def test_out_of_range_names_parameter(self):
        result = await make_registry().call("echo", {"city": "Paris", "days": 17})
        assert result.is_error
        assert "invalid value for parameter 'days'" in result.first_text

    @pytest.mark.asyncio
    async def test_extra_parameters_ignored(self):
        result = await make_registry().call("echo", {"city": "Paris", "mood": "sunny", "loud": True})
        assert not result.is_error
        assert result.first_text == "PARIS:7:NONE:TRUE"

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_error_result(self):
        result = await make_registry().call("explode", {})
        assert result.is_error
        assert "boom" in result.first_text

    @pytest.mark.asyncio
    async def test_non_tool_result_is_error(self):
        result = await make_registry().call("sloppy", {})
        assert result.is_error

    @pytest.mark.asyncio
    async def test_never_raises_on_garbage(self):
        registry = make_registry()
        for name, arguments in [
            ("echo", {"city": None}),
            ("echo", {"city": ["a", "b"]}),
            ("echo", {"days": 3.5}),
            ("", {}),
        ]:
            result = await registry.call(name, arguments)
            assert isinstance(result, ToolResult)
            assert result.is_error
            assert result.content
