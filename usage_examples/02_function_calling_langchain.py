"""
Function calling with LangChain.

The same temperature function as 01, wrapped as an fclab Tool and handed to
ChatOpenAI as a LangChain StructuredTool:

    - basic: invoke with tools passed per call
    - bind: tools bound once with bind_tools
    - forced: tool_choice names the function, so even "Olá" calls it
    - chain: prompt | model with tools

The email challenge runs a chain over the mock get_emails tool for the
unread, read and starred inboxes.
"""

import logging

from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI

from fclab.settings import get_settings
from fclab.tools import GetEmailsTool, MockTemperatureTool
from fclab.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def build_chat() -> ChatOpenAI:
    settings = get_settings()
    return ChatOpenAI(model=settings.model, temperature=settings.temperature)


def basic_example(chat: ChatOpenAI, temperature_tool):
    logger.info("Starting basic example with an external function")
    response = chat.invoke(
        "Qual é a temperatura de Porto Alegre",
        tools=[temperature_tool.to_langchain()],
    )
    logger.debug("Response: %s", response.model_dump_json(indent=2))


def bind_example(chat: ChatOpenAI, temperature_tool):
    logger.info("Starting example with bound function")
    chat_with_tools = chat.bind_tools([temperature_tool.to_langchain()])
    response = chat_with_tools.invoke("Qual é a temperatura de Porto Alegre")
    logger.debug("Response with bind: %s", response.tool_calls)


def forced_function_example(chat: ChatOpenAI, temperature_tool):
    logger.info("Starting example forcing the function call")
    forced = chat.bind_tools(
        [temperature_tool.to_langchain()],
        tool_choice=temperature_tool.name,
    )
    response = forced.invoke("Olá")
    logger.debug("Forced response: %s", response.tool_calls)


def chain_example(chat: ChatOpenAI, temperature_tool):
    logger.info("Starting example with chain")
    prompt = ChatPromptTemplate.from_messages([
        ("system", "Você é um assistente amigável chamado Isaac"),
        ("user", "{input}"),
    ])
    chain = prompt | chat.bind_tools([temperature_tool.to_langchain()])

    response = chain.invoke({"input": "Qual a temperatura em Floripa?"})
    logger.debug("Chain response: %s", response.tool_calls or response.content)


def email_challenge(chat: ChatOpenAI):
    prompt = ChatPromptTemplate.from_messages([
        ("system", "Você é um assistente que busca emails"),
        ("user", "{input}"),
    ])
    emails_tool = GetEmailsTool()
    chain = prompt | chat.bind_tools([emails_tool.to_langchain()])

    for case, inbox in enumerate(["unread", "read", "starred"], start=1):
        logger.info("Starting email challenge - case %02d", case)
        response = chain.invoke({"input": f"Quais são os emails do inbox {inbox} sobre tecnologia"})

        for call in response.tool_calls:
            logger.debug("Tool call: %s -> %s", call["args"], emails_tool.invoke(call["args"]))


def main():
    setup_logging()
    try:
        chat = build_chat()
        temperature_tool = MockTemperatureTool()

        basic_example(chat, temperature_tool)
        bind_example(chat, temperature_tool)
        forced_function_example(chat, temperature_tool)
        chain_example(chat, temperature_tool)

        logger.info("Starting email challenge")
        email_challenge(chat)
    except Exception:
        logger.exception("Error in LangChain function calling example")


if __name__ == "__main__":
    main()
