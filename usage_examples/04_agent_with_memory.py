"""
Agent executor with memory.

The agent keeps one JSON-lines transcript per session under FCLAB_HISTORY_DIR,
so the second question can be answered from the first one:

    "Meu nome é Adriano"  ->  "Qual o meu nome?"

The third question goes through the live temperature tool.
"""

import logging

from fclab import Agent, FileHistoryFactory
from fclab.settings import get_settings
from fclab.tools import OpenMeteoTemperatureTool, WikipediaSearchTool
from fclab.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)

SESSION_ID = "test-session-1"


def main():
    setup_logging()
    settings = get_settings()
    try:
        logger.info("Starting agent executor with file system memory example")

        agent = Agent(
            model=settings.model,
            tools=[OpenMeteoTemperatureTool(), WikipediaSearchTool()],
            system_prompt="You are a friendly assistant named Isaac",
            memory=FileHistoryFactory(settings.history_dir),
            verbose=True,
        )

        for label, question in [
            ("basic conversation", "Meu nome é Adriano"),
            ("memory", "Qual o meu nome?"),
            ("temperature query", "Qual é a temperatura em Porto Alegre?"),
        ]:
            logger.info("Testing %s", label)
            response = agent.run(question, session_id=SESSION_ID)
            logger.info("Response: %s", response)
    except Exception:
        logger.exception("Error in agent with memory example")


if __name__ == "__main__":
    main()
