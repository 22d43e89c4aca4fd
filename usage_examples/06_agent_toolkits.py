"""
Agent toolkits: one agent per data source.

    - DataFrame agent: df_shape / df_head / df_describe over the passenger table
    - SQL agent: list_tables / get_table_schema / run_query over the catalog
"""

import logging

from fclab import Agent, CatalogDB, DataFrameDB
from fclab.settings import get_settings
from fclab.tools import dataframe_toolkit, sql_toolkit
from fclab.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def main():
    setup_logging()
    settings = get_settings()
    try:
        logger.info("Starting agent toolkits example")

        logger.info("Testing DataFrame Agent")
        df_agent = Agent(
            model=settings.model,
            tools=dataframe_toolkit(DataFrameDB()),
            system_prompt="You are a helpful assistant that analyzes data using pandas DataFrame operations.",
        )
        response = df_agent.run("What is the shape of the DataFrame?")
        logger.info("DataFrame Agent response: %s", response)

        logger.info("Testing SQL Agent")
        sql_agent = Agent(
            model=settings.model,
            tools=sql_toolkit(CatalogDB()),
            system_prompt="You are a helpful assistant that analyzes data using SQL queries.",
        )
        response = sql_agent.run("Which artist has the most albums?")
        logger.info("SQL Agent response: %s", response)
    except Exception:
        logger.exception("Error in agent toolkits example")


if __name__ == "__main__":
    main()
