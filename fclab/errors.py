"""Exceptions raised by the response router and the agent loop."""


class FCLabError(Exception):
    """Base class for fclab errors."""


class ToolNotFoundError(FCLabError, KeyError):
    """The model asked for a tool that was not registered."""

    def __init__(self, name, available):
        self.name = name
        self.available = list(available)
        super().__init__(
            f"Tool {name} not found. Available tools: {', '.join(self.available)}"
        )

    def __str__(self):
        return self.args[0]


class ToolExecutionError(FCLabError, RuntimeError):
    """A local tool raised while running."""


class UnexpectedResponseError(FCLabError, ValueError):
    """The model reply matched none of the known response shapes."""


class OutputParserError(FCLabError, ValueError):
    """ReAct text could not be parsed into an action or a final answer."""


class AgentError(FCLabError, RuntimeError):
    """The agent loop stopped without a final answer."""
