"""
Agent types over the same (mocked) Python REPL tool:

    - Tool calling agent: the model requests the tool through native tool calls
    - ReAct agent: the model writes Thought / Action / Action Input text, which
      is parsed into the next step
"""

import logging

from fclab import Agent, ReActAgent
from fclab.settings import get_settings
from fclab.tools import MockPythonReplTool
from fclab.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a friendly assistant. Use the Python REPL tool to help answer questions."


def main():
    setup_logging()
    settings = get_settings()
    tools = [MockPythonReplTool()]
    try:
        logger.info("Starting agent types example")

        logger.info("Testing Tool Calling Agent")
        tool_calling_agent = Agent(model=settings.model, tools=tools, system_prompt=SYSTEM_PROMPT)
        response = tool_calling_agent.run("Qual é o décimo valor da sequência fibonacci?")
        logger.info("Tool Calling Agent response: %s", response)

        logger.info("Testing ReAct Agent")
        react_agent = ReActAgent(model=settings.model, tools=tools, system_prompt=SYSTEM_PROMPT)
        response = react_agent.run("Quantas letras tem a palavra LangChain?")
        logger.info("ReAct Agent response: %s", response)
    except Exception:
        logger.exception("Error in agent types example")


if __name__ == "__main__":
    main()
