"""
Agent module for FCLab (Function-Calling Lab).

This module implements a minimal agent executor as a LangGraph graph: the
model plans, a tool runs, its observation is replayed to the model, and the
loop ends when the model gives a final answer.

Key concepts:
    - plan ⇄ act loop: plan asks the model for the next step, act runs the tool
    - Scratchpad: every (action, observation) step is replayed on the next plan
    - Memory: optional session-keyed history, one user turn and one assistant
      turn saved per run
    - Two agent types: native tool calling (Agent) and text ReAct (ReActAgent)

Example:

     from fclab import Agent, ReActAgent, MockPythonReplTool, FileHistoryFactory

     # Example 1: Tool-calling agent with file-backed memory
     agent = Agent(
         model="gpt-3.5-turbo-0125",
         tools=[MockPythonReplTool()],
         system_prompt="You are a friendly assistant named Isaac",
         memory=FileHistoryFactory(".history"),
     )
     agent.run("Meu nome é Adriano", session_id="test-session-1")
     agent.run("Qual o meu nome?", session_id="test-session-1")

     # Example 2: ReAct agent (no native tool calling, parses Thought/Action text)
     react = ReActAgent(model="gpt-3.5-turbo-0125", tools=[MockPythonReplTool()])
     react.run("Quantas letras tem a palavra LangChain?")
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from langgraph.graph import StateGraph, END
from pydantic import BaseModel, Field

from .History import ChatHistory, to_chat_messages
from .Messages import (
    AIMessage, AgentAction, AgentFinish, AgentStep, ToolCall,
    assistant, system, tool_result, user,
)
from .Tool import Tool
from .errors import AgentError, UnexpectedResponseError
from .query_llm import query_llm, render_template
from .react_parser import parse_react_output
from .route_response import route_response
from .settings import get_settings

logger = logging.getLogger(__name__)

INST_DIR = Path(__file__).parent / "inst"

DEFAULT_SYSTEM_PROMPT = "You are a friendly assistant."


# =========================================================
# Graph State
# =========================================================

class AgentState(BaseModel):
    """
    State object passed between nodes in the agent execution graph.

    Attributes:
        input: The user's message for this run
        chat_history: Earlier turns of the session (chat-completions messages)
        intermediate_steps: Tool steps taken so far in this run
        response: Latest planned step (AgentAction or AgentFinish)
        call_id: Provider id of the tool call behind `response`, if any
        output: Final answer (set once the model finishes)
        error: Error message if planning fails (None if no errors)
        iterations: Number of model calls made in this run
    """
    input: str
    chat_history: List[dict] = Field(default_factory=list)
    intermediate_steps: List[AgentStep] = Field(default_factory=list)
    response: Optional[Union[AgentAction, AgentFinish]] = None
    call_id: Optional[str] = None
    output: Optional[str] = None
    error: Optional[str] = None
    iterations: int = 0


# =========================================================
# Agent
# =========================================================

class Agent:
    """
    Tool-calling agent executor.

    The graph is:
        plan → (final answer | error) → END
        plan → act → plan

    Attributes:
        model: LLM model identifier (e.g., "gpt-3.5-turbo-0125", "claude-3-5-sonnet-latest")
        tools: Dictionary mapping tool names to Tool objects
        system_prompt: System message placed before the history
        memory: Callable session_id -> ChatHistory (None = no memory)
        max_iterations: Maximum number of model calls per run
        llm_fn: Chat function with query_llm's signature (injectable for tests)
        verbose: Log step dumps at INFO instead of DEBUG
        graph: Compiled LangGraph StateGraph
    """

    def __init__(
            self,
            model: Optional[str] = None,
            tools: Optional[List[Tool]] = None,
            system_prompt: str = DEFAULT_SYSTEM_PROMPT,
            memory: Optional[Callable[[str], ChatHistory]] = None,
            max_iterations: Optional[int] = None,
            llm_fn: Optional[Callable[..., AIMessage]] = None,
            verbose: bool = False,
    ):
        settings = get_settings()

        self.model = model or settings.model
        self.tools = {t.name: t for t in tools or []}
        self.system_prompt = system_prompt
        self.memory = memory
        self.max_iterations = settings.max_iterations if max_iterations is None else max_iterations
        self.llm_fn = llm_fn or query_llm
        self.verbose = verbose

        self.graph = self._build_graph()

    # =====================================================
    # Graph Construction
    # =====================================================

    def _build_graph(self):
        g = StateGraph(AgentState)

        g.add_node("plan", self._plan)
        g.add_node("act", self._act)

        g.set_entry_point("plan")

        g.add_conditional_edges(
            "plan",
            lambda state: "act" if isinstance(state.response, AgentAction) and state.error is None else "end",
            {
                "act": "act",
                "end": END,
            }
        )
        g.add_edge("act", "plan")

        return g.compile()

    # =====================================================
    # Prompt assembly (overridden by ReActAgent)
    # =====================================================

    def _scratchpad(self, steps: List[AgentStep]) -> List[dict]:
        """Each step replayed as an assistant tool call plus its tool result."""
        messages = []
        for i, step in enumerate(steps):
            call_id = step.call_id or f"call_{i}"
            messages.append(assistant(
                step.action.log,
                [ToolCall(id=call_id, name=step.action.tool, args=step.action.tool_input)],
            ))
            messages.append(tool_result(call_id, step.observation, name=step.action.tool))
        return messages

    def _build_messages(self, state: AgentState) -> List[dict]:
        return [
            system(self.system_prompt),
            *state.chat_history,
            user(state.input),
            *self._scratchpad(state.intermediate_steps),
        ]

    def _call_model(self, messages: List[dict]) -> AIMessage:
        return self.llm_fn(
            messages,
            model=self.model,
            tools=list(self.tools.values()),
            tool_choice="auto",
        )

    def _next_step(self, reply: AIMessage):
        """
        Interpret a model reply.

        Returns:
            (AgentAction | AgentFinish, call_id)

        Raises:
            UnexpectedResponseError: Tool call without a name, or an empty reply
        """
        if reply.tool_calls:
            call = reply.tool_calls[0]
            if not call.name:
                raise UnexpectedResponseError(f"Invalid tool call response: {reply.model_dump_json()}")
            action = AgentAction(tool=call.name, tool_input=call.args, log=reply.content)
            return action, call.id

        if reply.content:
            return AgentFinish(return_values={"output": reply.content}, log=reply.content), None

        raise UnexpectedResponseError(f"Invalid tool call response: {reply.model_dump_json()}")

    # =====================================================
    # Graph Nodes
    # =====================================================

    def _plan(self, state: AgentState):
        """
        Plan node: asks the model for the next step.

        Returns:
            Dict with "response" (and "output" once finished), or "error"
            when the iteration budget is spent
        """
        if state.iterations >= self.max_iterations:
            return {
                "error": f"Agent stopped after {self.max_iterations} iterations without a final answer"
            }

        messages = self._build_messages(state)

        self._debug(
            "PLAN / MESSAGES",
            iteration=state.iterations + 1,
            messages=messages,
        )

        reply = self._call_model(messages)

        self._debug(
            "PLAN / REPLY",
            reply=reply.model_dump(),
        )

        step, call_id = self._next_step(reply)

        update = {
            "response": step,
            "call_id": call_id,
            "iterations": state.iterations + 1,
        }
        if isinstance(step, AgentFinish):
            update["output"] = step.return_values.get("output")

        return update

    def _act(self, state: AgentState):
        """
        Act node: runs the planned tool through route_response and records the
        observation.
        """
        action = state.response
        observation = route_response(action, self.tools)

        self._debug(
            "ACT / TOOL RESULT",
            tool=action.tool,
            tool_input=action.tool_input,
            observation=observation,
        )

        step = AgentStep(action=action, observation=observation, call_id=state.call_id)
        return {
            "intermediate_steps": state.intermediate_steps + [step],
            "response": None,
            "call_id": None,
        }

    def _debug(self, title: str, **payload):
        """
        Logs a banner-style dump of one graph step.

        Args:
            title: Section title for the debug output
            **payload: Key-value pairs to display (formatted as JSON)

        Note:
            Logged at INFO when verbose=True, otherwise at DEBUG.
        """
        level = logging.INFO if self.verbose else logging.DEBUG
        if not logger.isEnabledFor(level):
            return

        lines = []
        lines.append("\n" + "=" * 80)
        lines.append(f"[{title}]")
        lines.append("-" * 80)

        for key, value in payload.items():
            lines.append(f"\n{key}:")
            lines.append(json.dumps(value, indent=2, ensure_ascii=False, default=str))
        lines.append("=" * 80)

        logger.log(level, "\n".join(lines))

    # =====================================================
    # Public API
    # =====================================================

    def run(self, input: str, session_id: str = "default-session") -> str:
        """
        Run the agent loop for one user message.

        Args:
            input: The user's message
            session_id: Key of the conversation history (used when memory is set)

        Returns:
            The final answer text

        Raises:
            AgentError: The loop failed (tool error, unparsable reply, or
                        max_iterations reached)

        Example:
            agent.run("Qual é o décimo valor da sequência fibonacci?")
            'O décimo valor da sequência de Fibonacci é 55.'
        """
        history = self.memory(session_id) if self.memory is not None else None
        chat_history = to_chat_messages(history.messages) if history is not None else []

        initial_state = {
            "input": input,
            "chat_history": chat_history,
            "intermediate_steps": [],
            "response": None,
            "call_id": None,
            "output": None,
            "error": None,
            "iterations": 0,
        }

        try:
            result = self.graph.invoke(
                initial_state,
                config={"recursion_limit": 2 * self.max_iterations + 5},
            )
        except Exception as e:
            raise AgentError(f"Agent failed: {e}") from e

        output = result.get("output")
        if result.get("error") is not None or output is None:
            raise AgentError(result.get("error") or "Unknown failure")

        if history is not None:
            history.add_user_message(input)
            history.add_ai_message(output)

        return output


# =========================================================
# ReAct Agent
# =========================================================

class ReActAgent(Agent):
    """
    Agent that reasons in text instead of using native tool calling.

    The prompt (inst/react.j2) lists the tools and asks for
    Thought / Action / Action Input lines; generation stops before the model
    can invent an Observation, the tool runs, and the observation is appended
    to the textual scratchpad.

    Attributes:
        template_path: Jinja2 template of the ReAct prompt
    """

    STOP = ["\nObservation:"]

    def __init__(self, *args, template_path: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.template_path = template_path or str(INST_DIR / "react.j2")

    def _scratchpad_text(self, steps: List[AgentStep]) -> str:
        parts = []
        for step in steps:
            parts.append(f"{step.action.log}\nObservation: {step.observation}\nThought: ")
        return "".join(parts)

    def _build_messages(self, state: AgentState) -> List[dict]:
        prompt = render_template(
            self.template_path,
            {
                "tools": [
                    {
                        "name": t.name,
                        "description": t.description,
                        "args": json.dumps(t.parameters().get("properties", {}), ensure_ascii=False),
                    }
                    for t in self.tools.values()
                ],
                "tool_names": ", ".join(self.tools),
                "chat_history": state.chat_history,
                "input": state.input,
                "agent_scratchpad": self._scratchpad_text(state.intermediate_steps),
            },
        )
        return [system(self.system_prompt), user(prompt)]

    def _call_model(self, messages: List[dict]) -> AIMessage:
        return self.llm_fn(
            messages,
            model=self.model,
            stop=self.STOP,
        )

    def _next_step(self, reply: AIMessage):
        step = parse_react_output(reply.content)
        if isinstance(step, AgentAction):
            step.tool_input = self._map_bare_input(step.tool, step.tool_input)
        return step, None

    def _map_bare_input(self, tool_name: str, tool_input: dict) -> dict:
        """A bare-text Action Input goes to the tool's only argument."""
        tool = self.tools.get(tool_name)
        if tool is None or set(tool_input) != {"input"}:
            return tool_input

        properties = list(tool.parameters().get("properties", {}))
        if len(properties) == 1 and properties[0] != "input":
            return {properties[0]: tool_input["input"]}
        return tool_input
