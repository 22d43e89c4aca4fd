"""
Function calling with the OpenAI chat completions API.

This does not go through fclab.query_llm: it shows the raw two-call flow that
the rest of the examples abstract over.

    1. First call: the model decides whether it needs the function
    2. The function runs locally with the arguments the model produced
    3. Second call: the model gets the function result and writes the answer

demonstrate_tool_choices() shows the tool_choice modes:
    - "auto": the model decides (default)
    - "none": the model must not call functions
    - {"type": "function", "function": {"name": ...}}: force one function
"""

import json
import logging

from openai import OpenAI

from fclab.settings import get_settings
from fclab.tools import get_current_temperature
from fclab.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)

MODEL = get_settings().model

# -------------------------------------------------
# Tool definition (chat completions format)
# -------------------------------------------------
tools = [
    {
        "type": "function",
        "function": {
            "name": "get_current_temperature",
            "description": "Gets the current temperature in a given city",
            "parameters": {
                "type": "object",
                "properties": {
                    "location": {
                        "type": "string",
                        "description": "The name of the city. Ex: São Paulo",
                    },
                    "unit": {
                        "type": "string",
                        "enum": ["celsius", "fahrenheit"],
                    },
                },
                "required": ["location"],
            },
        },
    }
]


def function_calling(client: OpenAI):
    question = {"role": "user", "content": "Qual é temperatura em Porto Alegre agora?"}

    # First call: the model decides whether to use the function
    response = client.chat.completions.create(
        model=MODEL,
        messages=[question],
        tools=tools,
        tool_choice="auto",
    )
    message = response.choices[0].message
    logger.debug("Initial response: %s", message.model_dump_json(indent=2))

    if not message.tool_calls:
        logger.info("Model answered without the function: %s", message.content)
        return

    logger.info("Model decided to use the temperature function")
    tool_call = message.tool_calls[0]
    args = json.loads(tool_call.function.arguments)

    observation = get_current_temperature(args["location"], args.get("unit", "celsius"))
    logger.debug("Function result: %s", observation)

    # Second call: send the function result back
    final_response = client.chat.completions.create(
        model=MODEL,
        messages=[
            question,
            {
                "role": "assistant",
                "content": message.content or "",
                "tool_calls": [tc.model_dump() for tc in message.tool_calls],
            },
            {"role": "tool", "tool_call_id": tool_call.id, "content": observation},
        ],
        tools=tools,
        tool_choice="auto",
    )

    logger.info("Final response: %s", final_response.choices[0].message.content)


def demonstrate_tool_choices(client: OpenAI):
    cases = [
        ("auto", "Olá", "auto"),
        ("none", "Qual a temperatura em Porto Alegre?", "none"),
        (
            "forced function",
            "Olá",
            {"type": "function", "function": {"name": "get_current_temperature"}},
        ),
    ]

    for label, prompt, tool_choice in cases:
        logger.info("Testing tool_choice: %s", label)
        response = client.chat.completions.create(
            model=MODEL,
            messages=[{"role": "user", "content": prompt}],
            tools=tools,
            tool_choice=tool_choice,
        )
        logger.debug(
            "Response with %s choice: %s",
            label, response.choices[0].message.model_dump_json(indent=2),
        )


def main():
    setup_logging()
    try:
        client = OpenAI()
        logger.info("Starting function calling example")
        function_calling(client)
        demonstrate_tool_choices(client)
    except Exception:
        logger.exception("Error in function calling example")


if __name__ == "__main__":
    main()
