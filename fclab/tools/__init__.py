from .weather import MockTemperatureTool, OpenMeteoTemperatureTool, get_current_temperature
from .wikipedia import WikipediaSearchTool
from .python_repl import MockPythonReplTool
from .emails import GetEmailsTool, get_emails
from .dataframe import DataFrameShapeTool, DataFrameHeadTool, DataFrameDescribeTool, dataframe_toolkit
from .sql import ListTablesTool, TableSchemaTool, RunQueryTool, sql_toolkit

__all__ = ['MockTemperatureTool', 'OpenMeteoTemperatureTool', 'get_current_temperature',
           'WikipediaSearchTool', 'MockPythonReplTool', 'GetEmailsTool', 'get_emails',
           'DataFrameShapeTool', 'DataFrameHeadTool', 'DataFrameDescribeTool', 'dataframe_toolkit',
           'ListTablesTool', 'TableSchemaTool', 'RunQueryTool', 'sql_toolkit']
