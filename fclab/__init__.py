from .Agent import Agent, ReActAgent
from .DB import DataFrameDB, CatalogDB, PASSENGERS, CATALOG
from .History import (ChatHistory, InMemoryChatHistory, FileChatHistory,
                      FileHistoryFactory, in_memory_session_history)
from .Messages import AIMessage, ToolCall, AgentAction, AgentFinish, AgentStep
from .Tool import Tool, FunctionTool, function_tool
from .errors import (FCLabError, ToolNotFoundError, ToolExecutionError,
                     UnexpectedResponseError, OutputParserError, AgentError)
from .query_llm import query_llm, render_template
from .react_parser import parse_react_output
from .route_response import route_response
from .tools import (MockTemperatureTool, OpenMeteoTemperatureTool, WikipediaSearchTool,
                    MockPythonReplTool, GetEmailsTool, dataframe_toolkit, sql_toolkit)

__all__ = ['Agent', 'ReActAgent', 'DataFrameDB', 'CatalogDB', 'PASSENGERS', 'CATALOG',
           'ChatHistory', 'InMemoryChatHistory', 'FileChatHistory', 'FileHistoryFactory',
           'in_memory_session_history', 'AIMessage', 'ToolCall', 'AgentAction', 'AgentFinish',
           'AgentStep', 'Tool', 'FunctionTool', 'function_tool', 'FCLabError',
           'ToolNotFoundError', 'ToolExecutionError', 'UnexpectedResponseError',
           'OutputParserError', 'AgentError', 'query_llm', 'render_template',
           'parse_react_output', 'route_response', 'MockTemperatureTool',
           'OpenMeteoTemperatureTool', 'WikipediaSearchTool', 'MockPythonReplTool',
           'GetEmailsTool', 'dataframe_toolkit', 'sql_toolkit']
