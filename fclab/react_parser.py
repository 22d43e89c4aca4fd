"""
Parser for ReAct-style completions.

The model is prompted to answer in blocks like:

    Thought: I should run some code
    Action: python_repl_ast
    Action Input: {"query": "len('fclab lab')"}

or, once it knows the answer:

    Thought: I now know the final answer
    Final Answer: 9
"""

import json
import re
from typing import Union

from .Messages import AgentAction, AgentFinish
from .errors import OutputParserError

FINAL_ANSWER = "Final Answer:"

_ACTION_RE = re.compile(
    r"Action\s*\d*\s*:[\s]*(.*?)[\s]*Action\s*\d*\s*Input\s*\d*\s*:[\s]*(.*)",
    re.DOTALL,
)


def _parse_action_input(raw: str):
    """
    JSON object when the model wrote one; otherwise the bare text.

    A trailing "Observation:" (when no stop sequence cut it) is dropped.
    """
    raw = raw.split("\nObservation:")[0].strip().strip("`").strip()
    if raw.startswith("json"):
        raw = raw[4:].strip()

    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return raw.strip('"')

    return value


def parse_react_output(text: str) -> Union[AgentAction, AgentFinish]:
    """
    Turn one ReAct completion into an AgentAction or AgentFinish.

    "Final Answer:" takes precedence over an Action in the same text. An
    Action Input that is not a JSON object is returned as {"input": <text>};
    the caller maps it to the tool's single argument.

    Raises:
        OutputParserError: Neither a final answer nor an action was found
    """
    if FINAL_ANSWER in text:
        answer = text.split(FINAL_ANSWER)[-1].strip()
        return AgentFinish(return_values={"output": answer}, log=text)

    match = _ACTION_RE.search(text)
    if match is None:
        raise OutputParserError(f"Could not parse LLM output: `{text}`")

    tool = match.group(1).strip()
    if not tool:
        raise OutputParserError(f"Missing tool name in LLM output: `{text}`")

    tool_input = _parse_action_input(match.group(2))
    if not isinstance(tool_input, dict):
        tool_input = {"input": tool_input if isinstance(tool_input, str) else json.dumps(tool_input)}

    return AgentAction(tool=tool, tool_input=tool_input, log=text)
