"""Open-Meteo forecast client for current weather readings."""

from datetime import UTC, datetime

import httpx

from app.models.weather import Coordinates, WeatherFailure, WeatherResult, WeatherSnapshot, WeatherSuccess
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OpenMeteoClient:
    """Fetches the current temperature and wind speed for a fixed location.

    Every call goes to the network: intermediary caches are asked not to
    serve stored copies. Failures are returned as ``WeatherFailure`` values,
    never raised.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        coordinates: Coordinates,
        location: str,
    ):
        self.http_client = http_client
        self.base_url = base_url
        self.coordinates = coordinates
        self.location = location

    async def fetch(self, coordinates: Coordinates | None = None) -> WeatherResult:
        """Fetch one reading.

        Args:
            coordinates: Where to read the weather (defaults to the configured point)

        Returns:
            ``WeatherSuccess`` with a fresh snapshot, or ``WeatherFailure`` with the reason
        """
        coords = coordinates or self.coordinates
        params = {
            "latitude": coords.latitude,
            "longitude": coords.longitude,
            "current_weather": "true",
        }

        try:
            response = await self.http_client.get(
                self.base_url, params=params, headers={"Cache-Control": "no-cache"}
            )
            response.raise_for_status()
            current = response.json()["current_weather"]
            snapshot = WeatherSnapshot(
                time=datetime.now(UTC),
                temperature=current["temperature"],
                wind_speed=current["windspeed"],
                location=self.location,
            )
        except httpx.HTTPStatusError as e:
            return self._failure(f"Forecast API returned {e.response.status_code}")
        except httpx.HTTPError as e:
            return self._failure(f"Forecast API unreachable: {e.__class__.__name__}")
        except (ValueError, KeyError, TypeError) as e:
            return self._failure(f"Malformed forecast response: {e!r}")
        except Exception as e:
            return self._failure(f"Weather fetch error: {e!r}")

        logger.debug(f"Fetched weather for {self.location}: {snapshot.temperature}°C, {snapshot.wind_speed} km/h")
        return WeatherSuccess(snapshot=snapshot)

    def _failure(self, reason: str) -> WeatherFailure:
        logger.warning(f"Weather fetch failed for {self.location}: {reason}")
        return WeatherFailure(reason=reason, time=datetime.now(UTC), location=self.location)
