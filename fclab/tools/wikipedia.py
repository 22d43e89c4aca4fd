import logging
from typing import Any, List, Optional

import httpx
from pydantic import BaseModel, Field

from ..Tool import Tool

logger = logging.getLogger(__name__)


class WikipediaSearchInput(BaseModel):
    query: str = Field(description="The search query")


class WikipediaSearchTool(Tool):
    """
    Searches Wikipedia and returns the intro extract of the top pages.

    Attributes:
        language: Wikipedia language edition (subdomain)
        max_results: How many search hits to summarize
        client: Optional httpx.Client to reuse
    """

    name: str = "search_wikipedia"
    description: str = "Searches Wikipedia and returns summaries of pages for the query"
    result_template: Optional[str] = "Information found:\n{result}"

    language: str = Field(default="pt", exclude=True)
    max_results: int = Field(default=3, exclude=True)
    client: Optional[Any] = Field(default=None, exclude=True, repr=False)
    timeout: float = Field(default=10.0, exclude=True)

    def __init__(self, **kwargs):
        super().__init__(**kwargs, input_schema=WikipediaSearchInput, impl=self)

    @property
    def api_url(self) -> str:
        return f"https://{self.language}.wikipedia.org/w/api.php"

    def _get(self, client: httpx.Client, params: dict) -> dict:
        response = client.get(self.api_url, params={**params, "format": "json", "origin": "*"})
        response.raise_for_status()
        return response.json()

    def _search(self, client: httpx.Client, query: str) -> List[str]:
        data = self._get(client, {"action": "query", "list": "search", "srsearch": query})
        hits = data.get("query", {}).get("search", [])[: self.max_results]
        summaries = []

        for hit in hits:
            title = hit["title"]
            page_data = self._get(client, {
                "action": "query",
                "prop": "extracts",
                "exintro": 1,
                "titles": title,
            })
            pages = page_data.get("query", {}).get("pages", {})
            if not pages:
                continue
            page = next(iter(pages.values()))
            summaries.append(f"Title: {title}\nSummary: {page.get('extract', '')}")

        return summaries

    def run(self, input: WikipediaSearchInput) -> str:
        try:
            if self.client is not None:
                summaries = self._search(self.client, input.query)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    summaries = self._search(client, input.query)
        except httpx.HTTPError as exc:
            logger.error("Error searching Wikipedia: %s", exc)
            raise RuntimeError(f"Wikipedia search failed: {exc}") from exc

        return "\n\n".join(summaries) if summaries else "No results found"
