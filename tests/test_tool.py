"""
Tool abstraction: validation, execution, schema export.
"""

import pytest
from jsonschema.exceptions import SchemaError
from pydantic import BaseModel, ValidationError

from fclab.Tool import EmptyInput, FunctionTool, Tool, function_tool


def add(a: int, b: int) -> int:
    """Add two integers.

    Used as a tiny function tool.
    """
    return a + b


class AddInput(BaseModel):
    a: int
    b: int


# ══════════════════════════════════════════════
# function_tool
# ══════════════════════════════════════════════

class TestFunctionTool:
    def test_defaults_from_function(self):
        tool = function_tool(add)
        assert isinstance(tool, FunctionTool)
        assert tool.name == "add"
        assert tool.description == "Add two integers."

    def test_invoke_validates_and_runs(self):
        tool = function_tool(add)
        assert tool.invoke({"a": 7, "b": 5}) == 12

    def test_invoke_coerces_numeric_strings(self):
        tool = function_tool(add, input_schema=AddInput)
        assert tool.invoke({"a": "7", "b": 5}) == 12

    def test_invalid_arguments(self):
        tool = function_tool(add)
        with pytest.raises(ValidationError):
            tool.invoke({"a": "seven", "b": 5})

    def test_missing_argument(self):
        tool = function_tool(add)
        with pytest.raises(ValueError):
            tool.invoke({"a": 1})

    def test_explicit_name_and_description(self):
        tool = function_tool(lambda a, b: a * b, name="mul", description="Multiply", input_schema=AddInput)
        assert tool.name == "mul"
        assert tool.invoke({"a": 3, "b": 4}) == 12


# ══════════════════════════════════════════════
# Base Tool
# ══════════════════════════════════════════════

class TestTool:
    def test_no_impl(self):
        tool = Tool(name="noop", description="Does nothing", input_schema=None)
        with pytest.raises(RuntimeError, match="no local implementation"):
            tool.invoke({})

    def test_format_result_plain(self):
        tool = function_tool(add)
        assert tool.format_result(12) == "12"

    def test_format_result_template(self):
        tool = function_tool(add, result_template="The sum is {result}")
        assert tool.format_result(12) == "The sum is 12"

    def test_impl_not_serialized(self):
        tool = function_tool(add)
        dumped = tool.model_dump()
        assert "impl" not in dumped
        assert dumped["name"] == "add"

    def test_empty_input_schema(self):
        tool = Tool(name="noop", description="Does nothing", input_schema=None)
        assert tool.parameters() == EmptyInput.model_json_schema()


# ══════════════════════════════════════════════
# Schema export
# ══════════════════════════════════════════════

class TestSchemaExport:
    def test_to_openai(self):
        schema = function_tool(add, input_schema=AddInput).to_openai()
        assert schema["type"] == "function"
        assert schema["function"]["name"] == "add"
        assert schema["function"]["description"] == "Add two integers."
        params = schema["function"]["parameters"]
        assert set(params["properties"]) == {"a", "b"}
        assert sorted(params["required"]) == ["a", "b"]

    def test_to_langchain(self):
        lc_tool = function_tool(add, input_schema=AddInput, result_template="= {result}").to_langchain()
        assert lc_tool.name == "add"
        assert lc_tool.invoke({"a": 2, "b": 3}) == "= 5"


# ══════════════════════════════════════════════
# from_json_schema
# ══════════════════════════════════════════════

WEATHER_PARAMETERS = {
    "type": "object",
    "properties": {
        "location": {"type": "string", "description": "The name of the city"},
        "unit": {"type": "string", "enum": ["celsius", "fahrenheit"]},
    },
    "required": ["location"],
}


class TestFromJsonSchema:
    def test_parameters_kept_verbatim(self):
        tool = Tool.from_json_schema("weather", "Weather", WEATHER_PARAMETERS, lambda location, unit="celsius": location)
        assert tool.parameters() == WEATHER_PARAMETERS

    def test_invoke(self):
        tool = Tool.from_json_schema(
            "weather", "Weather", WEATHER_PARAMETERS,
            lambda location, unit="celsius": f"{location}/{unit}",
        )
        assert tool.invoke({"location": "Porto Alegre"}) == "Porto Alegre/celsius"
        assert tool.invoke({"location": "Porto Alegre", "unit": "fahrenheit"}) == "Porto Alegre/fahrenheit"

    def test_invalid_arguments(self):
        tool = Tool.from_json_schema("weather", "Weather", WEATHER_PARAMETERS, lambda location: location)
        with pytest.raises(ValueError, match="Arguments do not match schema for weather_Input"):
            tool.invoke({"unit": "kelvin"})

    def test_invalid_schema(self):
        with pytest.raises(SchemaError):
            Tool.from_json_schema("bad", "Bad", {"type": "not-a-type"}, lambda: None)

    def test_to_langchain_passes_arguments(self):
        tool = Tool.from_json_schema(
            "weather", "Weather", WEATHER_PARAMETERS,
            lambda location, unit="celsius": f"{location.upper()}/{unit}",
        )
        lc_tool = tool.to_langchain()

        assert lc_tool.invoke({"location": "poa"}) == "POA/celsius"
        assert lc_tool.invoke({"location": "poa", "unit": "fahrenheit"}) == "POA/fahrenheit"

    def test_to_langchain_still_validates(self):
        tool = Tool.from_json_schema("weather", "Weather", WEATHER_PARAMETERS, lambda location: location)
        with pytest.raises(ValueError, match="Arguments do not match schema for weather_Input"):
            tool.to_langchain().invoke({"unit": "kelvin"})
