from pydantic import BaseModel, Field

from ..Tool import Tool

# code fragment -> canned output; nothing is ever executed
MOCK_OUTPUTS = [
    ("fibonacci", "55"),  # fibonacci(10)
    ("len", "9"),         # len("LangChain")
]
DEFAULT_OUTPUT = "Code executed successfully"


class PythonReplInput(BaseModel):
    query: str = Field(description="The Python code to execute")


class MockPythonReplTool(Tool):
    """
    Stand-in for a Python REPL tool. Real code execution would need a
    sandbox; this one answers from MOCK_OUTPUTS.
    """

    name: str = "python_repl_ast"
    description: str = "Executes Python code and returns the result"

    def __init__(self, **kwargs):
        super().__init__(**kwargs, input_schema=PythonReplInput, impl=self)

    def run(self, input: PythonReplInput) -> str:
        for fragment, output in MOCK_OUTPUTS:
            if fragment in input.query:
                return output
        return DEFAULT_OUTPUT
