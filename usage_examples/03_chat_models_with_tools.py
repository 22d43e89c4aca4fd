"""
Chat model with tools, as one LangChain chain:

    prompt | ChatOpenAI with tools | route_response

route_response runs the tool the model asked for (live Open-Meteo temperature
or Wikipedia search) or passes the model's text through, so every invoke
returns a plain string.
"""

import logging

from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import RunnableLambda
from langchain_openai import ChatOpenAI

from fclab import route_response
from fclab.settings import get_settings
from fclab.tools import OpenMeteoTemperatureTool, WikipediaSearchTool
from fclab.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def build_chain():
    settings = get_settings()
    tools = [OpenMeteoTemperatureTool(), WikipediaSearchTool()]

    prompt = ChatPromptTemplate.from_messages([
        ("system", "You are a friendly assistant named Isaac"),
        ("user", "{input}"),
    ])
    chat = ChatOpenAI(model=settings.model, temperature=settings.temperature)

    return (
        prompt
        | chat.bind_tools([t.to_langchain() for t in tools])
        | RunnableLambda(lambda message: route_response(message, tools))
    )


def main():
    setup_logging()
    try:
        logger.info("Starting chat models with tools example")
        chain = build_chain()

        for label, question in [
            ("simple greeting", "Hello"),
            ("Wikipedia search", "Who was Isaac Asimov?"),
            ("temperature check", "What's the temperature in São Paulo?"),
        ]:
            logger.info("Testing %s", label)
            response = chain.invoke({"input": question})
            logger.info("%s response: %s", label.capitalize(), response)
    except Exception:
        logger.exception("Error in chat models with tools example")


if __name__ == "__main__":
    main()
