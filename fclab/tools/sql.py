"""
SQL toolkit: list tables / table schema / run a query over the mock catalog.

All three tools share one CatalogDB and return JSON strings.
"""

import json
from typing import List, Optional, Type

from pydantic import BaseModel, Field, PrivateAttr

from ..DB import CatalogDB
from ..Tool import EmptyInput, Tool


class TableSchemaInput(BaseModel):
    table: str = Field(description="Table name")


class RunQueryInput(BaseModel):
    query: str = Field(description="SQL query to execute")


class _CatalogTool(Tool):
    _db: CatalogDB = PrivateAttr()

    def __init__(self, db: Optional[CatalogDB] = None, **kwargs):
        super().__init__(**kwargs, impl=self)
        self._db = db or CatalogDB()


class ListTablesTool(_CatalogTool):
    name: str = "list_tables"
    description: str = "List all tables in the database"
    input_schema: Type[BaseModel] | None = EmptyInput

    def run(self, input: EmptyInput) -> str:
        return json.dumps(self._db.tables())


class TableSchemaTool(_CatalogTool):
    name: str = "get_table_schema"
    description: str = "Get the schema of a table"
    input_schema: Type[BaseModel] | None = TableSchemaInput

    def run(self, input: TableSchemaInput) -> str:
        return json.dumps(self._db.table_schema(input.table))


class RunQueryTool(_CatalogTool):
    name: str = "run_query"
    description: str = "Run a SQL query on the database"
    input_schema: Type[BaseModel] | None = RunQueryInput

    def run(self, input: RunQueryInput) -> str:
        return json.dumps(self._db.query(input.query), ensure_ascii=False)


def sql_toolkit(db: Optional[CatalogDB] = None) -> List[Tool]:
    db = db or CatalogDB()
    return [
        ListTablesTool(db=db),
        TableSchemaTool(db=db),
        RunQueryTool(db=db),
    ]
