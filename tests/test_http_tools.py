"""
HTTP-backed tools, served by httpx.MockTransport.
"""

from datetime import datetime, timezone

import httpx
import pytest

from fclab.tools import OpenMeteoTemperatureTool, WikipediaSearchTool
from fclab.tools.weather import CoordinatesInput, closest_hour_index


FORECAST = {
    "hourly": {
        "time": ["2024-01-01T00:00", "2024-01-01T01:00", "2024-01-01T02:00"],
        "temperature_2m": [20.1, 21.5, 22.0],
    }
}


def make_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


# ══════════════════════════════════════════════
# Open-Meteo
# ══════════════════════════════════════════════

class TestClosestHour:
    def test_naive_now(self):
        assert closest_hour_index(FORECAST["hourly"]["time"], datetime(2024, 1, 1, 1, 10)) == 1

    def test_aware_now_is_compared_in_utc(self):
        now = datetime(2024, 1, 1, 1, 50, tzinfo=timezone.utc)
        assert closest_hour_index(FORECAST["hourly"]["time"], now) == 2

    def test_before_first_hour(self):
        assert closest_hour_index(FORECAST["hourly"]["time"], datetime(2023, 12, 31, 20, 0)) == 0

    def test_empty(self):
        with pytest.raises(ValueError):
            closest_hour_index([])


class TestOpenMeteoTemperatureTool:
    def test_run(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            return httpx.Response(200, json=FORECAST)

        tool = OpenMeteoTemperatureTool(client=make_client(handler))
        result = tool.run(CoordinatesInput(latitude=-30.03, longitude=-51.23), now=datetime(2024, 1, 1, 1, 10))

        assert result == "21.5°C"
        assert seen["url"].host == "api.open-meteo.com"
        assert seen["url"].params["hourly"] == "temperature_2m"
        assert seen["url"].params["forecast_days"] == "1"
        assert seen["url"].params["latitude"] == "-30.03"

    def test_invoke_and_template(self):
        tool = OpenMeteoTemperatureTool(client=make_client(lambda request: httpx.Response(200, json=FORECAST)))
        result = tool.invoke({"latitude": -23.55, "longitude": -46.63})
        assert result.endswith("°C")
        assert tool.format_result("21.5°C") == "The current temperature is 21.5°C"

    def test_http_error(self):
        tool = OpenMeteoTemperatureTool(client=make_client(lambda request: httpx.Response(500)))
        with pytest.raises(RuntimeError, match="Request to API https://api.open-meteo.com/v1/forecast failed"):
            tool.invoke({"latitude": 0, "longitude": 0})

    def test_rejects_non_numeric_coordinates(self):
        tool = OpenMeteoTemperatureTool(client=make_client(lambda request: httpx.Response(200, json=FORECAST)))
        with pytest.raises(ValueError):
            tool.invoke({"latitude": "north", "longitude": 0})


# ══════════════════════════════════════════════
# Wikipedia
# ══════════════════════════════════════════════

def wikipedia_handler(titles):
    def handler(request: httpx.Request) -> httpx.Response:
        params = request.url.params
        assert params["format"] == "json"
        assert params["origin"] == "*"

        if params.get("list") == "search":
            return httpx.Response(200, json={"query": {"search": [{"title": t} for t in titles]}})

        if params.get("prop") == "extracts":
            assert params["exintro"] == "1"
            title = params["titles"]
            return httpx.Response(200, json={"query": {"pages": {"42": {"extract": f"About {title}"}}}})

        return httpx.Response(400)

    return handler


class TestWikipediaSearchTool:
    def test_search(self):
        tool = WikipediaSearchTool(client=make_client(wikipedia_handler(["Isaac Asimov", "Fundação"])))
        result = tool.invoke({"query": "Isaac Asimov"})
        assert result == (
            "Title: Isaac Asimov\nSummary: About Isaac Asimov\n\n"
            "Title: Fundação\nSummary: About Fundação"
        )

    def test_at_most_three_results(self):
        titles = [f"Page {i}" for i in range(5)]
        tool = WikipediaSearchTool(client=make_client(wikipedia_handler(titles)))
        result = tool.invoke({"query": "page"})
        assert result.count("Title: ") == 3
        assert "Page 3" not in result

    def test_no_results(self):
        tool = WikipediaSearchTool(client=make_client(wikipedia_handler([])))
        assert tool.invoke({"query": "xyzzy"}) == "No results found"

    def test_language_edition(self):
        hosts = []

        def handler(request):
            hosts.append(request.url.host)
            return httpx.Response(200, json={"query": {"search": []}})

        WikipediaSearchTool(language="en", client=make_client(handler)).invoke({"query": "Asimov"})
        assert hosts == ["en.wikipedia.org"]

    def test_default_is_portuguese(self):
        assert WikipediaSearchTool().api_url == "https://pt.wikipedia.org/w/api.php"

    def test_http_error(self):
        tool = WikipediaSearchTool(client=make_client(lambda request: httpx.Response(503)))
        with pytest.raises(RuntimeError, match="Wikipedia search failed"):
            tool.invoke({"query": "Asimov"})

    def test_result_template(self):
        tool = WikipediaSearchTool()
        assert tool.format_result("x") == "Information found:\nx"
