"""
Mock data sources for FCLab (Function-Calling Lab).

Static, read-only tables that stand in for real integrations in the toolkit
examples:
    - PASSENGERS / DataFrameDB: a tiny Titanic passenger table held in pandas
    - CATALOG / CatalogDB: a two-table Chinook excerpt loaded into SQLite

Both are built once from the constants below, never mutated and never
persisted.

Example:
     df = DataFrameDB()
     df.shape()                  # (5, 12)
     df.describe("Age")          # {"count": 5, "mean": 31.2, "min": 22, "max": 38}

     db = CatalogDB()
     db.tables()                 # ['Album', 'Artist']
     db.query("SELECT * FROM Artist")
    [{'ArtistId': 1, 'Name': 'AC/DC'}, {'ArtistId': 2, 'Name': 'Accept'}]
"""

import re
import sqlite3
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd


# =========================================================
# Mock data
# =========================================================

PASSENGERS = [
    {"PassengerId": 1, "Survived": 1, "Pclass": 3, "Name": "Braund, Mr. Owen Harris",
     "Sex": "male", "Age": 22, "SibSp": 1, "Parch": 0, "Ticket": "A/5 21171",
     "Fare": 7.25, "Cabin": None, "Embarked": "S"},
    {"PassengerId": 2, "Survived": 1, "Pclass": 1,
     "Name": "Cumings, Mrs. John Bradley (Florence Briggs Thayer)",
     "Sex": "female", "Age": 38, "SibSp": 1, "Parch": 0, "Ticket": "PC 17599",
     "Fare": 71.2833, "Cabin": "C85", "Embarked": "C"},
    {"PassengerId": 3, "Survived": 1, "Pclass": 3, "Name": "Heikkinen, Miss. Laina",
     "Sex": "female", "Age": 26, "SibSp": 0, "Parch": 0, "Ticket": "STON/O2. 3101282",
     "Fare": 7.925, "Cabin": None, "Embarked": "S"},
    {"PassengerId": 4, "Survived": 1, "Pclass": 1,
     "Name": "Futrelle, Mrs. Jacques Heath (Lily May Peel)",
     "Sex": "female", "Age": 35, "SibSp": 1, "Parch": 0, "Ticket": "113803",
     "Fare": 53.1, "Cabin": "C123", "Embarked": "S"},
    {"PassengerId": 5, "Survived": 0, "Pclass": 3, "Name": "Allen, Mr. William Henry",
     "Sex": "male", "Age": 35, "SibSp": 0, "Parch": 0, "Ticket": "373450",
     "Fare": 8.05, "Cabin": None, "Embarked": "S"},
]

CATALOG = {
    "Album": {
        "schema": {
            "columns": ["AlbumId", "Title", "ArtistId"],
            "types": ["INTEGER", "NVARCHAR(160)", "INTEGER"],
        },
        "data": [
            {"AlbumId": 1, "Title": "For Those About To Rock We Salute You", "ArtistId": 1},
            {"AlbumId": 2, "Title": "Balls to the Wall", "ArtistId": 2},
        ],
    },
    "Artist": {
        "schema": {
            "columns": ["ArtistId", "Name"],
            "types": ["INTEGER", "NVARCHAR(120)"],
        },
        "data": [
            {"ArtistId": 1, "Name": "AC/DC"},
            {"ArtistId": 2, "Name": "Accept"},
        ],
    },
}


# =========================================================
# DataFrame source
# =========================================================

class DataFrameDB:
    """
    pandas DataFrame over the mock passenger rows.

    Attributes:
        df: The DataFrame (a private copy; callers never see the constant)
    """

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None):
        rows = PASSENGERS if rows is None else rows
        self.df = pd.DataFrame(rows)

    def shape(self) -> Tuple[int, int]:
        return tuple(int(n) for n in self.df.shape)

    def head(self, n: int = 5) -> List[Dict[str, Any]]:
        """
        First n rows as records, with missing values as None.
        """
        head = self.df.head(max(n, 0))
        head = head.astype(object).where(head.notna(), None)
        return [
            {key: _to_python(value) for key, value in record.items()}
            for record in head.to_dict(orient="records")
        ]

    def describe(self, column: str) -> Dict[str, Any]:
        """
        count / mean / min / max over the numeric values of a column.

        Raises:
            ValueError: Unknown column, or column without numeric values
        """
        if column not in self.df.columns:
            raise ValueError(f"Column {column} not found in DataFrame")

        values = self.df[column]
        if not pd.api.types.is_numeric_dtype(values):
            raise ValueError(f"Column {column} has no numeric values")

        values = values.dropna()
        if values.empty:
            raise ValueError(f"Column {column} has no numeric values")

        return {
            "count": int(values.count()),
            "mean": float(values.mean()),
            "min": _to_python(values.min()),
            "max": _to_python(values.max()),
        }


# =========================================================
# SQL source
# =========================================================

class CatalogDB:
    """
    In-memory SQLite database built from the CATALOG tables.

    Each table is loaded with pandas using the declared column types, then
    the connection is switched to query_only so tool calls cannot modify it.

    Attributes:
        catalog: Table definitions ({name: {"schema": ..., "data": [...]}})
        conn: sqlite3.Connection object
    """

    def __init__(self, catalog: Optional[Dict[str, Dict[str, Any]]] = None):
        self.catalog = CATALOG if catalog is None else catalog
        self.conn = sqlite3.connect(":memory:")
        self._build()

    def _build(self):
        for table, definition in self.catalog.items():
            columns = definition["schema"]["columns"]
            types = definition["schema"]["types"]
            df = pd.DataFrame(definition["data"], columns=columns)
            df.to_sql(
                table,
                self.conn,
                index=False,
                dtype=dict(zip(columns, types)),
            )
        self.conn.execute("PRAGMA query_only = ON")

    # ======================================================
    # Public API
    # ======================================================

    def tables(self) -> List[str]:
        cur = self.conn.cursor()
        cur.execute(
            "SELECT name FROM sqlite_master "
            "WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
        return [row[0] for row in cur.fetchall()]

    def table_schema(self, table: str) -> Dict[str, List[str]]:
        """
        Column names and declared types of a table.

        Returns:
            {"columns": [...], "types": [...]}

        Raises:
            ValueError: Unknown table (names are case-sensitive)
        """
        if table not in self.tables():
            raise ValueError(f"Table {table} not found")

        cur = self.conn.cursor()
        cur.execute(f'PRAGMA table_info("{table}")')
        info = cur.fetchall()
        return {
            "columns": [col_name for _, col_name, _, _, _, _ in info],
            "types": [col_type for _, _, col_type, _, _, _ in info],
        }

    def query(self, sql: str) -> List[Dict[str, Any]]:
        """
        Run a read-only query and return the rows as dicts.

        Raises:
            ValueError: Statement is not a SELECT, or SQLite rejected it
        """
        if not _READ_ONLY_SQL.match(sql or ""):
            raise ValueError(f"Query not supported: {sql}")

        cur = self.conn.cursor()
        try:
            cur.execute(sql)
        except sqlite3.Error as e:
            raise ValueError(f"Query not supported: {sql} ({e})") from e

        columns = [desc[0] for desc in cur.description] if cur.description else []
        return [dict(zip(columns, row)) for row in cur.fetchall()]


_READ_ONLY_SQL = re.compile(r"^\s*(select|with)\b", re.IGNORECASE)


def _to_python(value):
    """numpy scalar -> plain Python value (json.dumps can't handle numpy)."""
    if hasattr(value, "item"):
        return value.item()
    return value
