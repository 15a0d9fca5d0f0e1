"""Weather reading models and the fetch result type."""

from dataclasses import dataclass
from datetime import datetime
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, Field

UNAVAILABLE: Final = "Unavailable"

Reading = float | Literal["Unavailable"]


@dataclass(frozen=True)
class Coordinates:
    """Latitude/longitude pair sent to the forecast API."""

    latitude: float
    longitude: float


class WeatherSnapshot(BaseModel):
    """One point-in-time weather reading."""

    time: datetime
    temperature: Reading
    wind_speed: Reading = Field(alias="windSpeed")
    location: str

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_placeholder(self) -> bool:
        return self.temperature == UNAVAILABLE or self.wind_speed == UNAVAILABLE


@dataclass
class WeatherSuccess:
    """A live reading from the forecast API."""

    snapshot: WeatherSnapshot
    ok: Literal[True] = True

    def to_snapshot(self) -> WeatherSnapshot:
        return self.snapshot


@dataclass
class WeatherFailure:
    """A fetch that produced no data, and why."""

    reason: str
    time: datetime
    location: str
    ok: Literal[False] = False

    def to_snapshot(self) -> WeatherSnapshot:
        """Placeholder snapshot with both readings marked unavailable."""
        return WeatherSnapshot(
            time=self.time,
            temperature=UNAVAILABLE,
            wind_speed=UNAVAILABLE,
            location=self.location,
        )


WeatherResult = WeatherSuccess | WeatherFailure
