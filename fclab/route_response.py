"""
Response routing.

route_response() looks at the shape of whatever came back from a model or an
agent step and decides what the caller gets:

    1. tool_calls               -> run the first requested tool
    2. content                  -> the model's text
    3. return_values            -> the final answer of an AgentFinish
    4. tool + tool_input        -> run the tool of an AgentAction
    5. anything else            -> UnexpectedResponseError

Works on fclab AIMessage / AgentAction / AgentFinish, LangChain messages and
plain dicts (camelCase keys accepted), so it can sit at the end of a LangChain
chain as well as inside the agent loop.
"""

import json
import logging
from typing import Any, Dict, Mapping, Sequence, Union

from .Tool import Tool
from .errors import ToolExecutionError, ToolNotFoundError, UnexpectedResponseError

logger = logging.getLogger(__name__)

Tools = Union[Sequence[Tool], Mapping[str, Tool]]


def _field(response: Any, *names: str) -> Any:
    """First non-missing attribute / key among `names`."""
    for name in names:
        if isinstance(response, Mapping):
            if name in response:
                return response[name]
        elif hasattr(response, name):
            return getattr(response, name)
    return None


def _tools_by_name(tools: Tools) -> Dict[str, Tool]:
    if isinstance(tools, Mapping):
        return dict(tools)
    return {tool.name: tool for tool in tools}


def _call_parts(call: Any):
    """
    (name, args) of one tool call.

    fclab ToolCall has name/args, LangChain dicts have name/args, raw OpenAI
    calls nest them under "function" with JSON-encoded arguments.
    """
    function = _field(call, "function")
    if function is not None:
        name = _field(function, "name")
        args = _field(function, "arguments")
    else:
        name = _field(call, "name")
        args = _field(call, "args")

    if isinstance(args, str):
        args = json.loads(args) if args else {}
    return name, dict(args or {})


def execute_tool(tools: Tools, name: str, args: Dict[str, Any]) -> str:
    """
    Run one tool by name and format its result.

    Raises:
        ToolNotFoundError: No tool called `name`
        ToolExecutionError: The tool raised (original exception chained)
    """
    by_name = _tools_by_name(tools)
    tool = by_name.get(name)
    if tool is None:
        raise ToolNotFoundError(name, list(by_name))

    logger.debug("Executing tool %s with input: %s", name, args)
    try:
        result = tool.invoke(args)
    except Exception as e:
        raise ToolExecutionError(f"Error executing tool {name}: {e}") from e

    return tool.format_result(result)


def route_response(response: Any, tools: Tools) -> str:
    logger.debug("Routing response: %r", response)

    tool_calls = _field(response, "tool_calls", "toolCalls")
    if tool_calls:
        logger.info("Processing tool call from AIMessage")
        name, args = _call_parts(tool_calls[0])
        return execute_tool(tools, name, args)

    content = _field(response, "content")
    if content:
        logger.info("Processing AIMessage response")
        return content if isinstance(content, str) else str(content)

    return_values = _field(response, "return_values", "returnValues")
    if return_values is not None:
        logger.info("Processing final response from model")
        output = _field(return_values, "output")
        if output is None:
            raise UnexpectedResponseError(f"Final response has no output: {return_values!r}")
        return output if isinstance(output, str) else str(output)

    tool = _field(response, "tool")
    tool_input = _field(response, "tool_input", "toolInput")
    if tool and tool_input is not None:
        if isinstance(tool_input, str):
            tool_input = json.loads(tool_input)
        logger.info("Processing tool call for %s", tool)
        return execute_tool(tools, tool, dict(tool_input))

    raise UnexpectedResponseError(f"Unexpected response format: {response!r}")
