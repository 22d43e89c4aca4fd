"""
Tool module for FCLab (Function-Calling Lab).

Defines the Tool abstraction used by every example: a name and description the
model sees, an input schema the arguments are validated against, and a local
implementation that actually runs when the model asks for the tool.

Key concepts:
    - Tool: Base class for functions a model can call
    - Input schemas: Pydantic models, exported as JSON Schema for the provider
    - Tool.impl: Runtime implementation attached to the Tool object
    - result_template: Optional formatting of the raw result for the model

Ways to build a tool:
    - Subclass Tool (see fclab.tools) and implement run(input)
    - function_tool(func, ...) for a plain Python function
    - Tool.from_json_schema(...) for a hand-written chat-completions schema

Example:
     class AddInput(BaseModel):
         a: int
         b: int

     add = function_tool(lambda a, b: a + b, name="add",
                         description="Add two integers", input_schema=AddInput)

     add.to_openai()             # schema for client.chat.completions.create(tools=[...])
     add.invoke({"a": 7, "b": 5})
    12
"""

import inspect
from typing import Any, Callable, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, create_model

from .utils.schema_utils import jsonschema_to_pydantic_model


class EmptyInput(BaseModel):
    """Input schema for tools that take no arguments."""


# =========================================================
# Base Tool
# =========================================================

class Tool(BaseModel):
    """
    Base class for model-callable tools/functions.

    Attributes:
        name: Function name (shown to the model)
        description: What the tool does (helps the model decide when to use it)
        input_schema: Pydantic model defining expected arguments
        impl: Runtime implementation object with .run() method
        result_template: Optional format string with a {result} placeholder

    The Tool is serializable (for passing to provider APIs) but the impl is
    excluded from serialization since it's only needed at runtime.
    """
    name: str
    description: str
    input_schema: Type[BaseModel] | None

    # Runtime implementation, must have .run(input) -> output
    impl: Optional[Any] = Field(default=None, exclude=True, repr=False)

    result_template: Optional[str] = None

    # Allow arbitrary types for input_schema (Pydantic class type)
    model_config = ConfigDict(arbitrary_types_allowed=True)

    # -------------------------
    # Execution
    # -------------------------

    def invoke(self, arguments: Optional[dict] = None) -> Any:
        """
        Validate raw model arguments and run the local implementation.

        Args:
            arguments: Dict of arguments as produced by the model

        Returns:
            Whatever the implementation returns

        Raises:
            RuntimeError: Tool has no local implementation
            ValueError: Arguments do not match input_schema
        """
        if self.impl is None:
            raise RuntimeError(f"Tool '{self.name}' has no local implementation")

        schema = self.input_schema or EmptyInput
        input_obj = schema.model_validate(arguments or {})
        return self.impl.run(input_obj)

    def format_result(self, result: Any) -> str:
        if self.result_template:
            return self.result_template.format(result=result)
        return str(result)

    # -------------------------
    # Schema export
    # -------------------------

    def parameters(self) -> dict:
        """JSON Schema of the arguments."""
        schema = self.input_schema or EmptyInput
        return schema.model_json_schema()

    def to_openai(self) -> dict:
        """Chat-completions tool definition."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters(),
            },
        }

    def to_langchain(self):
        """
        Expose this tool as a LangChain StructuredTool, e.g. for
        ChatOpenAI.bind_tools([...]).
        """
        from langchain_core.tools import StructuredTool

        def _run(**kwargs):
            return self.format_result(self.invoke(kwargs))

        args_schema = self.input_schema or EmptyInput
        # Raw JSON Schema wrappers have no pydantic fields; hand LangChain the dict
        if args_schema is not EmptyInput and not args_schema.model_fields:
            args_schema = self.parameters()

        return StructuredTool.from_function(
            func=_run,
            name=self.name,
            description=self.description,
            args_schema=args_schema,
        )

    # -------------------------
    # Constructors
    # -------------------------

    @classmethod
    def from_json_schema(
            cls,
            name: str,
            description: str,
            parameters: dict,
            func: Callable[..., Any],
            result_template: Optional[str] = None,
    ) -> "FunctionTool":
        """
        Build a tool from a raw JSON Schema "parameters" object.

        Arguments are validated with jsonschema and passed to func as keywords.
        """
        schema_model = jsonschema_to_pydantic_model(f"{name}_Input", parameters)
        return FunctionTool(
            func=func,
            name=name,
            description=description,
            input_schema=schema_model,
            result_template=result_template,
        )


# =========================================================
# Function tools
# =========================================================

class FunctionTool(Tool):
    """
    Tool backed by a plain Python function.

    The validated input is unpacked into keyword arguments, so the function
    signature must match the field names of input_schema.
    """

    _func: Callable[..., Any] = PrivateAttr()

    def __init__(self, func: Callable[..., Any], **kwargs):
        super().__init__(**kwargs, impl=self)
        self._func = func

    def run(self, input: BaseModel) -> Any:
        return self._func(**input.model_dump())


def _schema_from_signature(func: Callable[..., Any], name: str) -> Type[BaseModel]:
    fields = {}
    for param in inspect.signature(func).parameters.values():
        annotation = param.annotation if param.annotation is not inspect.Parameter.empty else Any
        default = param.default if param.default is not inspect.Parameter.empty else ...
        fields[param.name] = (annotation, default)
    return create_model(f"{name}_Input", **fields)


def function_tool(
        func: Callable[..., Any],
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        input_schema: Optional[Type[BaseModel]] = None,
        result_template: Optional[str] = None,
) -> FunctionTool:
    """
    Wrap a Python function as a Tool.

    Name and description default to the function name and the first line of
    its docstring; the input schema defaults to one derived from the
    signature's annotations.
    """
    doc = inspect.getdoc(func) or ""
    name = name or func.__name__
    return FunctionTool(
        func=func,
        name=name,
        description=description or (doc.splitlines()[0] if doc else func.__name__),
        input_schema=input_schema or _schema_from_signature(func, name),
        result_template=result_template,
    )
