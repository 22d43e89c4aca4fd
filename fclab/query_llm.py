"""
LLM utilities for FCLab (Function-Calling Lab).

Provides one provider-agnostic chat call used by the examples and the agent:
    - Automatic routing based on model name (gpt-*, o1-*, claude-*, gemini-*)
    - Chat-completions message lists in, normalized AIMessage out
    - Tool calling with the tool_choice modes auto / none / required / forced
    - Optional disk-based caching for reproducibility and cost savings

Key features:
    - query_llm(): Main entry point for all LLM calls
    - render_template(): Jinja2 template rendering for prompts
    - Provider-specific message and tool format conversion

Supported providers:
    - OpenAI chat completions (gpt-3.5-turbo, gpt-4o, o1, ...)
    - Anthropic Claude messages (claude-3-5-sonnet, ...)
    - Google Gemini (gemini-2.0-flash, ...)

Example:
     # Plain text completion
     reply = query_llm([system("You are helpful."), user("What is 2+2?")], model="gpt-4o")
     print(reply.content)  # "4"

     # Tool calling
     reply = query_llm(
         [user("Qual é temperatura em Porto Alegre agora?")],
         model="gpt-3.5-turbo-0125",
         tools=[MockTemperatureTool()],
         tool_choice="auto",
     )
     print(reply.tool_calls)  # [ToolCall(id='call_...', name='get_current_temperature', args={...})]
"""

import hashlib
import json
import logging
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import diskcache
import openai
import anthropic
from google import genai
from google.genai import types
from jinja2 import Template

from .Messages import AIMessage, ToolCall, user
from .settings import get_settings

logger = logging.getLogger(__name__)

TOOL_CHOICE_MODES = ("auto", "none", "required")


def render_template(path, args):
    """
    Render a Jinja2 template file with provided arguments.

    Args:
        path: Path to .j2 template file
        args: Dict of variables to pass to template

    Returns:
        Rendered string
    """
    with open(path, encoding='utf8') as f:
        template = Template(f.read())

    return template.render(args)


def _hash_request(obj: dict) -> str:
    """
    Deterministic cache key: SHA256 of the sorted JSON request.
    """
    return hashlib.sha256(
        json.dumps(obj, sort_keys=True, ensure_ascii=False).encode("utf8")
    ).hexdigest()


def _load_args(arguments: Any) -> dict:
    """Tool-call arguments arrive as a JSON string from some providers."""
    if arguments is None or arguments == "":
        return {}
    if isinstance(arguments, str):
        return json.loads(arguments)
    return dict(arguments)


def _coerce_messages(messages: Union[str, Sequence[Any]]) -> List[dict]:
    if isinstance(messages, str):
        return [user(messages)]

    coerced = []
    for message in messages:
        if isinstance(message, AIMessage):
            coerced.append(message.to_message())
        elif isinstance(message, dict):
            coerced.append(message)
        else:
            raise TypeError(f"Unsupported message type: {type(message).__name__}")
    return coerced


def _normalize_tool_choice(tool_choice: Any, tools: Optional[list]) -> Tuple[str, Optional[str]]:
    """
    Reduce every accepted tool_choice spelling to (mode, function_name).

    Accepts "auto", "none", "required", a tool name, or the chat-completions
    dict {"type": "function", "function": {"name": ...}}.

    Raises:
        ValueError: Forced tool that is not among `tools`
    """
    if tool_choice is None:
        return "auto", None

    if isinstance(tool_choice, dict):
        name = (tool_choice.get("function") or {}).get("name") or tool_choice.get("name")
        if not name:
            raise ValueError(f"Invalid tool_choice: {tool_choice}")
    elif tool_choice in TOOL_CHOICE_MODES:
        return tool_choice, None
    elif tool_choice == "any":
        return "required", None
    else:
        name = tool_choice

    tool_names = [t.name for t in tools or []]
    if name not in tool_names:
        raise ValueError(
            f"tool_choice names '{name}' but available tools are: {', '.join(tool_names) or 'none'}"
        )
    return "function", name


def query_llm(
    messages: Union[str, Sequence[Any]],
    *,
    model: Optional[str] = None,
    tools: Optional[list] = None,
    tool_choice: Any = "auto",
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    stop: Optional[List[str]] = None,
    cache: Optional[str] = None,
    api_key: Optional[str] = None,
) -> AIMessage:
    """
    Unified chat call with automatic provider routing and optional caching.

    Args:
        messages: Chat-completions message dicts (or a single user string)
        model: Model identifier (defaults to FCLAB_MODEL)
        tools: List of fclab Tool objects the model may call
        tool_choice: "auto" (model decides), "none" (no tool calls),
                     "required" (must call some tool), or a tool name /
                     {"type": "function", "function": {"name": ...}} to force one
        temperature: Sampling temperature (defaults to FCLAB_TEMPERATURE)
        max_tokens: Maximum output tokens (defaults to FCLAB_MAX_TOKENS)
        stop: Stop sequences
        cache: Directory name for diskcache (defaults to FCLAB_CACHE_DIR, None = off)
        api_key: Provider API key (falls back to env vars)

    Returns:
        AIMessage with the reply text and any tool calls

    Raises:
        ValueError: Unknown model prefix or invalid tool_choice
        RuntimeError: Missing API key

    Provider routing:
        - "gpt-*", "o1*", "o3*", "o4*" → OpenAI
        - "claude-*" → Anthropic Claude
        - "gemini-*" → Google Gemini
    """
    settings = get_settings()
    model = model or settings.model
    temperature = settings.temperature if temperature is None else temperature
    max_tokens = max_tokens or settings.max_tokens
    cache = cache or settings.cache_dir

    messages = _coerce_messages(messages)
    tools = list(tools or [])
    mode, forced_name = _normalize_tool_choice(tool_choice, tools) if tools else ("auto", None)

    model_lower = model.lower()
    if model_lower.startswith(("gpt-", "o1", "o3", "o4")):
        provider = _query_openai
    elif model_lower.startswith("claude-"):
        provider = _query_claude
    elif model_lower.startswith("gemini-"):
        provider = _query_gemini
    else:
        raise ValueError(
            f"Unknown model provider for model '{model}'. "
            "Expected model name to start with 'gpt-', 'o1', 'o3', 'o4', 'claude-', or 'gemini-'"
        )

    request = {
        "model": model,
        "messages": messages,
        "tools": [t.to_openai() for t in tools],
        "tool_choice": [mode, forced_name],
        "temperature": temperature,
        "max_tokens": max_tokens,
        "stop": stop or [],
    }

    cache_obj = diskcache.Cache(cache) if cache is not None else None
    key = _hash_request(request)
    if cache_obj is not None and key in cache_obj:
        logger.debug("Cache hit for %s request %s", model, key[:12])
        return AIMessage.model_validate(cache_obj[key])

    logger.debug(
        "Calling %s with %d messages, %d tools, tool_choice=%s",
        model, len(messages), len(tools), forced_name or mode,
    )
    result = provider(
        messages, model, tools, mode, forced_name,
        temperature, max_tokens, stop, api_key,
    )

    if cache_obj is not None:
        cache_obj[key] = result.model_dump()

    return result


# =========================================================
# OpenAI
# =========================================================

def _convert_tools_for_openai(tools: list) -> list:
    return [tool.to_openai() for tool in tools]


def _convert_messages_for_openai(messages: List[dict]) -> List[dict]:
    converted = []
    for message in messages:
        if message["role"] == "tool":
            # chat completions identifies tool results by id only
            message = {k: v for k, v in message.items() if k != "name"}
        converted.append(message)
    return converted


def _parse_openai_response(resp) -> AIMessage:
    message = resp.choices[0].message
    calls = [
        ToolCall(id=tc.id, name=tc.function.name, args=_load_args(tc.function.arguments))
        for tc in (message.tool_calls or [])
    ]
    return AIMessage(content=message.content or "", tool_calls=calls)


def _query_openai(
    messages: List[dict],
    model: str,
    tools: list,
    mode: str,
    forced_name: Optional[str],
    temperature: float,
    max_tokens: int,
    stop: Optional[List[str]],
    api_key: Optional[str],
) -> AIMessage:
    """
    OpenAI chat.completions implementation.

    Note:
        Reasoning models (o1/o3/o4) take max_completion_tokens and no
        temperature.
    """
    resolved_key = api_key or os.getenv("OPENAI_API_KEY")
    if not resolved_key:
        raise RuntimeError(
            "OpenAI API key not provided. "
            "Pass api_key= or set OPENAI_API_KEY."
        )

    client = openai.OpenAI(api_key=resolved_key)

    req: Dict[str, Any] = {
        "model": model,
        "messages": _convert_messages_for_openai(messages),
    }
    if model.lower().startswith(("o1", "o3", "o4")):
        req["max_completion_tokens"] = max_tokens
    else:
        req["temperature"] = temperature
        req["max_tokens"] = max_tokens
    if stop:
        req["stop"] = stop

    if tools:
        req["tools"] = _convert_tools_for_openai(tools)
        if mode == "function":
            req["tool_choice"] = {"type": "function", "function": {"name": forced_name}}
        else:
            req["tool_choice"] = mode

    resp = client.chat.completions.create(**req)
    return _parse_openai_response(resp)


# =========================================================
# Anthropic Claude
# =========================================================

def _convert_tools_for_claude(tools: list) -> list:
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "input_schema": tool.parameters(),
        }
        for tool in tools
    ]


def _convert_messages_for_claude(messages: List[dict]) -> Tuple[str, List[dict]]:
    """
    Chat-completions messages -> (system prompt, Claude messages).

    Claude wants strictly alternating user/assistant turns, tool calls as
    tool_use blocks, and tool results as tool_result blocks inside a user turn,
    so consecutive turns of the same role are merged.
    """
    system_parts = []
    converted: List[dict] = []

    def add(role: str, blocks: List[dict]):
        if not blocks:
            return
        if converted and converted[-1]["role"] == role:
            converted[-1]["content"].extend(blocks)
        else:
            converted.append({"role": role, "content": list(blocks)})

    for message in messages:
        role = message["role"]
        content = message.get("content") or ""

        if role == "system":
            system_parts.append(content)
        elif role == "user":
            add("user", [{"type": "text", "text": content}])
        elif role == "assistant":
            blocks = [{"type": "text", "text": content}] if content else []
            for tc in message.get("tool_calls") or []:
                blocks.append({
                    "type": "tool_use",
                    "id": tc["id"],
                    "name": tc["function"]["name"],
                    "input": _load_args(tc["function"]["arguments"]),
                })
            add("assistant", blocks)
        elif role == "tool":
            add("user", [{
                "type": "tool_result",
                "tool_use_id": message["tool_call_id"],
                "content": content,
            }])
        else:
            raise ValueError(f"Unsupported message role: {role}")

    if not converted:
        converted = [{"role": "user", "content": [{"type": "text", "text": "."}]}]  # Messages must be non-empty

    return "\n\n".join(system_parts), converted


def _parse_claude_response(resp) -> AIMessage:
    text_parts = []
    calls = []
    for block in getattr(resp, "content", []) or []:
        block_type = getattr(block, "type", None)
        if block_type == "text":
            text_parts.append(getattr(block, "text", ""))
        elif block_type == "tool_use":
            calls.append(ToolCall(
                id=block.id,
                name=block.name,
                args=dict(getattr(block, "input", None) or {}),
            ))
    return AIMessage(content="".join(text_parts), tool_calls=calls)


def _query_claude(
    messages: List[dict],
    model: str,
    tools: list,
    mode: str,
    forced_name: Optional[str],
    temperature: float,
    max_tokens: int,
    stop: Optional[List[str]],
    api_key: Optional[str],
) -> AIMessage:
    """Claude messages API implementation."""
    resolved_key = api_key or os.getenv("ANTHROPIC_API_KEY")
    if not resolved_key:
        raise RuntimeError(
            "Claude API key not provided. "
            "Pass api_key= or set ANTHROPIC_API_KEY."
        )

    client = anthropic.Anthropic(api_key=resolved_key)
    system_prompt, claude_messages = _convert_messages_for_claude(messages)

    payload: Dict[str, Any] = {
        "model": model,
        "messages": claude_messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if system_prompt:
        payload["system"] = system_prompt
    if stop:
        payload["stop_sequences"] = stop

    if tools:
        payload["tools"] = _convert_tools_for_claude(tools)
        payload["tool_choice"] = {
            "auto": {"type": "auto"},
            "none": {"type": "none"},
            "required": {"type": "any"},
            "function": {"type": "tool", "name": forced_name},
        }[mode]

    resp = client.messages.create(**payload)
    return _parse_claude_response(resp)


# =========================================================
# Google Gemini
# =========================================================

def _convert_tools_for_gemini(tools: list) -> list:
    fn_decls = [
        types.FunctionDeclaration(
            name=tool.name,
            description=tool.description,
            parameters_json_schema=tool.parameters(),
        )
        for tool in tools
    ]
    return [types.Tool(function_declarations=fn_decls)]


def _convert_messages_for_gemini(messages: List[dict]) -> Tuple[str, List[types.Content]]:
    """
    Chat-completions messages -> (system instruction, Gemini contents).

    Assistant turns become role "model"; tool results become
    function_response parts, which Gemini matches by function name.
    """
    system_parts = []
    contents: List[types.Content] = []
    call_names: Dict[str, str] = {}

    def add(role: str, parts: List[types.Part]):
        if not parts:
            return
        if contents and contents[-1].role == role:
            contents[-1].parts.extend(parts)
        else:
            contents.append(types.Content(role=role, parts=list(parts)))

    for message in messages:
        role = message["role"]
        content = message.get("content") or ""

        if role == "system":
            system_parts.append(content)
        elif role == "user":
            add("user", [types.Part(text=content)])
        elif role == "assistant":
            parts = [types.Part(text=content)] if content else []
            for tc in message.get("tool_calls") or []:
                name = tc["function"]["name"]
                call_names[tc["id"]] = name
                parts.append(types.Part(function_call=types.FunctionCall(
                    id=tc["id"],
                    name=name,
                    args=_load_args(tc["function"]["arguments"]),
                )))
            add("model", parts)
        elif role == "tool":
            name = message.get("name") or call_names.get(message["tool_call_id"])
            if not name:
                raise ValueError(f"Cannot resolve tool name for call {message['tool_call_id']}")
            add("user", [types.Part(function_response=types.FunctionResponse(
                id=message["tool_call_id"],
                name=name,
                response={"result": content},
            ))])
        else:
            raise ValueError(f"Unsupported message role: {role}")

    return "\n\n".join(system_parts), contents


def _parse_gemini_response(resp) -> AIMessage:
    """
    Collect text and function calls from the first candidate.

    Gemini does not always assign call ids, so missing ones are numbered.
    """
    text_parts = []
    calls = []
    candidates = getattr(resp, "candidates", None) or []
    content = getattr(candidates[0], "content", None) if candidates else None

    for part in getattr(content, "parts", None) or []:
        fc = getattr(part, "function_call", None)
        if fc is not None and getattr(fc, "name", None):
            calls.append(ToolCall(
                id=getattr(fc, "id", None) or f"call_{len(calls)}",
                name=fc.name,
                args=dict(fc.args or {}),
            ))
        elif getattr(part, "text", None):
            text_parts.append(part.text)

    return AIMessage(content="".join(text_parts), tool_calls=calls)


def _query_gemini(
    messages: List[dict],
    model: str,
    tools: list,
    mode: str,
    forced_name: Optional[str],
    temperature: float,
    max_tokens: int,
    stop: Optional[List[str]],
    api_key: Optional[str],
) -> AIMessage:
    """Gemini generate_content implementation."""
    # Tries GEMINI_API_KEY, then GOOGLE_API_KEY
    resolved_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if not resolved_key:
        raise RuntimeError(
            "Gemini API key not provided. "
            "Pass api_key= or set GEMINI_API_KEY."
        )

    client = genai.Client(api_key=resolved_key)
    system_instruction, contents = _convert_messages_for_gemini(messages)

    config_args: Dict[str, Any] = {
        "temperature": temperature,
        "max_output_tokens": max_tokens,
    }
    if system_instruction:
        config_args["system_instruction"] = system_instruction
    if stop:
        config_args["stop_sequences"] = stop

    if tools:
        config_args["tools"] = _convert_tools_for_gemini(tools)
        calling_config = {
            "auto": types.FunctionCallingConfig(mode="AUTO"),
            "none": types.FunctionCallingConfig(mode="NONE"),
            "required": types.FunctionCallingConfig(mode="ANY"),
            "function": types.FunctionCallingConfig(mode="ANY", allowed_function_names=[forced_name]),
        }[mode]
        config_args["tool_config"] = types.ToolConfig(function_calling_config=calling_config)
        # fclab runs tools itself
        config_args["automatic_function_calling"] = types.AutomaticFunctionCallingConfig(disable=True)

    resp = client.models.generate_content(
        model=model,
        contents=contents,
        config=types.GenerateContentConfig(**config_args),
    )
    return _parse_gemini_response(resp)
