"""
route_response: one branch per response shape, plus its error cases.
"""

import json

import pytest
from langchain_core.messages import AIMessage as LCAIMessage
from pydantic import ValidationError

from fclab.Messages import AIMessage, AgentAction, AgentFinish, ToolCall
from fclab.Tool import function_tool
from fclab.errors import (
    FCLabError, ToolExecutionError, ToolNotFoundError, UnexpectedResponseError,
)
from fclab.route_response import route_response
from fclab.tools import MockPythonReplTool, MockTemperatureTool


@pytest.fixture
def tools():
    return [MockTemperatureTool(), MockPythonReplTool()]


class TestToolCalls:
    def test_fclab_message(self, tools):
        response = AIMessage(tool_calls=[
            ToolCall(id="call_1", name="get_current_temperature", args={"location": "Porto Alegre"}),
        ])
        data = json.loads(route_response(response, tools))
        assert data["temperature"] == "25"

    def test_only_first_call_runs(self, tools):
        calls = []
        echo = function_tool(lambda text: calls.append(text) or text, name="echo", description="Echo")
        response = AIMessage(tool_calls=[
            ToolCall(id="1", name="echo", args={"text": "first"}),
            ToolCall(id="2", name="echo", args={"text": "second"}),
        ])
        assert route_response(response, [echo]) == "first"
        assert calls == ["first"]

    def test_tool_calls_win_over_content(self, tools):
        response = AIMessage(
            content="Let me check",
            tool_calls=[ToolCall(id="1", name="python_repl_ast", args={"query": "fibonacci(10)"})],
        )
        assert route_response(response, tools) == "55"

    def test_langchain_message(self, tools):
        response = LCAIMessage(
            content="",
            tool_calls=[{"name": "python_repl_ast", "args": {"query": "len('LangChain')"}, "id": "call_9"}],
        )
        assert route_response(response, tools) == "9"

    def test_raw_openai_dict(self, tools):
        response = {
            "role": "assistant",
            "content": None,
            "tool_calls": [{
                "id": "call_1",
                "type": "function",
                "function": {"name": "get_current_temperature", "arguments": '{"location": "São Paulo"}'},
            }],
        }
        assert json.loads(route_response(response, tools))["temperature"] == "32"

    def test_tools_as_mapping(self, tools):
        response = AIMessage(tool_calls=[ToolCall(id="1", name="python_repl_ast", args={"query": "x = 1"})])
        assert route_response(response, {t.name: t for t in tools}) == "Code executed successfully"

    def test_result_template_applied(self):
        tool = function_tool(lambda: "21.5°C", name="temp", description="Temp",
                             result_template="The current temperature is {result}")
        response = AIMessage(tool_calls=[ToolCall(id="1", name="temp", args={})])
        assert route_response(response, [tool]) == "The current temperature is 21.5°C"


class TestContent:
    def test_fclab_message(self, tools):
        assert route_response(AIMessage(content="Olá! Como posso ajudar?"), tools) == "Olá! Como posso ajudar?"

    def test_langchain_message(self, tools):
        assert route_response(LCAIMessage(content="Hello"), tools) == "Hello"

    def test_dict(self, tools):
        assert route_response({"content": "oi"}, tools) == "oi"


class TestReturnValues:
    def test_agent_finish(self, tools):
        assert route_response(AgentFinish(return_values={"output": "55"}), tools) == "55"

    def test_camel_case_dict(self, tools):
        assert route_response({"returnValues": {"output": "done"}}, tools) == "done"

    def test_missing_output(self, tools):
        with pytest.raises(UnexpectedResponseError, match="Final response has no output"):
            route_response({"returnValues": {}}, tools)

    def test_non_string_output(self, tools):
        assert route_response(AgentFinish(return_values={"output": 55}), tools) == "55"


class TestAgentAction:
    def test_agent_action(self, tools):
        action = AgentAction(tool="python_repl_ast", tool_input={"query": "fibonacci(10)"})
        assert route_response(action, tools) == "55"

    def test_camel_case_dict(self, tools):
        response = {"tool": "get_current_temperature", "toolInput": {"location": "Porto Alegre"}}
        assert json.loads(route_response(response, tools))["location"] == "Porto Alegre"

    def test_json_string_input(self, tools):
        response = {"tool": "python_repl_ast", "tool_input": '{"query": "fibonacci(10)"}'}
        assert route_response(response, tools) == "55"


class TestErrors:
    def test_unknown_tool(self, tools):
        response = AIMessage(tool_calls=[ToolCall(id="1", name="search_web", args={})])
        with pytest.raises(ToolNotFoundError) as exc_info:
            route_response(response, tools)

        assert str(exc_info.value) == (
            "Tool search_web not found. Available tools: get_current_temperature, python_repl_ast"
        )
        assert exc_info.value.available == ["get_current_temperature", "python_repl_ast"]
        assert isinstance(exc_info.value, KeyError)

    def test_unknown_tool_in_agent_action(self, tools):
        with pytest.raises(ToolNotFoundError):
            route_response(AgentAction(tool="nope", tool_input={}), tools)

    def test_tool_raises(self):
        def broken():
            raise ConnectionError("service down")

        tool = function_tool(broken, name="broken", description="Always fails")
        response = AIMessage(tool_calls=[ToolCall(id="1", name="broken", args={})])

        with pytest.raises(ToolExecutionError, match="Error executing tool broken: service down") as exc_info:
            route_response(response, [tool])
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_invalid_arguments_are_execution_errors(self, tools):
        response = AIMessage(tool_calls=[ToolCall(id="1", name="get_current_temperature", args={"location": ""})])
        with pytest.raises(ToolExecutionError) as exc_info:
            route_response(response, tools)
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_empty_message(self, tools):
        with pytest.raises(UnexpectedResponseError, match="Unexpected response format"):
            route_response(AIMessage(), tools)

    def test_unknown_shape(self, tools):
        with pytest.raises(UnexpectedResponseError):
            route_response({"foo": "bar"}, tools)

    def test_errors_share_base(self, tools):
        with pytest.raises(FCLabError):
            route_response({}, tools)
