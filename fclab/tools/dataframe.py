"""
DataFrame toolkit: shape / head / describe over the mock passenger table.

All three tools share one DataFrameDB and return JSON strings.
"""

import json
from typing import List, Optional, Type

from pydantic import BaseModel, Field, PrivateAttr

from ..DB import DataFrameDB
from ..Tool import EmptyInput, Tool


class DataFrameHeadInput(BaseModel):
    n: int = Field(description="Number of rows to return")


class DataFrameDescribeInput(BaseModel):
    column: str = Field(description="Column name to describe")


class _DataFrameTool(Tool):
    _db: DataFrameDB = PrivateAttr()

    def __init__(self, db: Optional[DataFrameDB] = None, **kwargs):
        super().__init__(**kwargs, impl=self)
        self._db = db or DataFrameDB()


class DataFrameShapeTool(_DataFrameTool):
    name: str = "df_shape"
    description: str = "Get the shape of the DataFrame"
    input_schema: Type[BaseModel] | None = EmptyInput

    def run(self, input: EmptyInput) -> str:
        return json.dumps(list(self._db.shape()))


class DataFrameHeadTool(_DataFrameTool):
    name: str = "df_head"
    description: str = "Get the first n rows of the DataFrame"
    input_schema: Type[BaseModel] | None = DataFrameHeadInput

    def run(self, input: DataFrameHeadInput) -> str:
        return json.dumps(self._db.head(input.n), ensure_ascii=False)


class DataFrameDescribeTool(_DataFrameTool):
    name: str = "df_describe"
    description: str = "Get statistical description of the DataFrame"
    input_schema: Type[BaseModel] | None = DataFrameDescribeInput

    def run(self, input: DataFrameDescribeInput) -> str:
        return json.dumps(self._db.describe(input.column))


def dataframe_toolkit(db: Optional[DataFrameDB] = None) -> List[Tool]:
    db = db or DataFrameDB()
    return [
        DataFrameShapeTool(db=db),
        DataFrameHeadTool(db=db),
        DataFrameDescribeTool(db=db),
    ]
