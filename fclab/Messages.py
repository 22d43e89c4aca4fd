"""
Message shapes shared by the examples.

Conversations are plain lists of chat-completions dicts:

    {"role": "system" | "user" | "assistant" | "tool", "content": "..."}

Assistant turns that request tools carry "tool_calls", tool turns carry
"tool_call_id" and "name". The helpers below build those dicts so the example
scripts never spell them out by hand.

Model replies are normalized into AIMessage whatever provider produced them,
and the agent loop records its progress with AgentAction / AgentFinish /
AgentStep.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ToolCall(BaseModel):
    """A single tool request made by the model."""
    id: str
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class AIMessage(BaseModel):
    """
    Provider-independent model reply.

    Attributes:
        content: Text produced by the model ("" when it only called tools)
        tool_calls: Tool requests in the order the model produced them
    """
    role: str = "assistant"
    content: str = ""
    tool_calls: List[ToolCall] = Field(default_factory=list)

    def to_message(self) -> dict:
        return assistant(self.content, self.tool_calls)


class AgentAction(BaseModel):
    """A decision to run `tool` with `tool_input`."""
    tool: str
    tool_input: Dict[str, Any] = Field(default_factory=dict)
    log: str = ""


class AgentFinish(BaseModel):
    """A final answer; the text lives in return_values["output"]."""
    return_values: Dict[str, Any]
    log: str = ""


class AgentStep(BaseModel):
    action: AgentAction
    observation: str
    call_id: Optional[str] = None


# =========================================================
# Chat-completions message builders
# =========================================================

def system(content: str) -> dict:
    return {"role": "system", "content": content}


def user(content: str) -> dict:
    return {"role": "user", "content": content}


def assistant(content: str = "", tool_calls: Optional[List[ToolCall]] = None) -> dict:
    message = {"role": "assistant", "content": content or ""}
    if tool_calls:
        message["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {
                    "name": call.name,
                    "arguments": json.dumps(call.args, ensure_ascii=False),
                },
            }
            for call in tool_calls
        ]
    return message


def tool_result(tool_call_id: str, content: str, name: Optional[str] = None) -> dict:
    message = {"role": "tool", "tool_call_id": tool_call_id, "content": content}
    if name:
        message["name"] = name
    return message
