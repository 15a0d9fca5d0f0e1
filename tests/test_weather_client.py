"""Tests for the Open-Meteo weather client."""

import httpx
import pytest

from app.clients.open_meteo import OpenMeteoClient
from app.config import OPEN_METEO_FORECAST_URL
from app.models.weather import UNAVAILABLE, Coordinates, WeatherFailure, WeatherSuccess

NYC_COORDINATES = Coordinates(40.7128, -74.006)
FORECAST_BODY = {
    "latitude": 40.710335,
    "longitude": -73.99307,
    "current_weather": {"time": "2025-01-15T12:00", "temperature": 3.4, "windspeed": 14.8, "weathercode": 3},
}


def make_client(handler) -> OpenMeteoClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenMeteoClient(
        http_client,
        base_url=OPEN_METEO_FORECAST_URL,
        coordinates=NYC_COORDINATES,
        location="New York City, NY",
    )


class TestOpenMeteoClient:
    """Tests for fetching current weather."""

    @pytest.mark.asyncio
    async def test_fetch_success(self):
        client = make_client(lambda request: httpx.Response(200, json=FORECAST_BODY))

        result = await client.fetch()

        assert isinstance(result, WeatherSuccess)
        assert result.ok is True
        assert result.snapshot.temperature == 3.4
        assert result.snapshot.wind_speed == 14.8
        assert result.snapshot.location == "New York City, NY"

    @pytest.mark.asyncio
    async def test_request_parameters(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=FORECAST_BODY)

        await make_client(handler).fetch()

        request = seen[0]
        assert request.url.host == "api.open-meteo.com"
        assert request.url.path == "/v1/forecast"
        assert request.url.params["latitude"] == "40.7128"
        assert request.url.params["longitude"] == "-74.006"
        assert request.url.params["current_weather"] == "true"
        assert request.headers["cache-control"] == "no-cache"

    @pytest.mark.asyncio
    async def test_coordinates_override(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=FORECAST_BODY)

        await make_client(handler).fetch(Coordinates(51.5072, -0.1276))

        assert seen[0].url.params["latitude"] == "51.5072"

    @pytest.mark.asyncio
    async def test_unreachable_api(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await make_client(handler).fetch()

        assert isinstance(result, WeatherFailure)
        assert "unreachable" in result.reason
        snapshot = result.to_snapshot()
        assert snapshot.temperature == UNAVAILABLE
        assert snapshot.wind_speed == UNAVAILABLE
        assert snapshot.location == "New York City, NY"

    @pytest.mark.asyncio
    async def test_error_status(self):
        result = await make_client(lambda request: httpx.Response(503, text="Service Unavailable")).fetch()

        assert isinstance(result, WeatherFailure)
        assert result.reason == "Forecast API returned 503"

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        result = await make_client(lambda request: httpx.Response(200, json={"error": True})).fetch()

        assert result.ok is False
        assert result.reason.startswith("Malformed forecast response")

    @pytest.mark.asyncio
    async def test_null_reading_is_malformed(self):
        body = {"current_weather": {"temperature": None, "windspeed": 5.0}}
        result = await make_client(lambda request: httpx.Response(200, json=body)).fetch()

        assert result.ok is False

    @pytest.mark.asyncio
    async def test_closed_http_client(self):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        await http_client.aclose()
        client = OpenMeteoClient(
            http_client,
            base_url=OPEN_METEO_FORECAST_URL,
            coordinates=NYC_COORDINATES,
            location="New York City, NY",
        )

        result = await client.fetch()

        assert isinstance(result, WeatherFailure)
        assert result.reason.startswith("Weather fetch error")
        assert result.to_snapshot().temperature == UNAVAILABLE
