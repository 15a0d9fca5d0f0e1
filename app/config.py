"""Application settings read from the process environment."""

import os
from dataclasses import dataclass

from app.clients.anthropic import AnthropicConfig

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

WEATHER_SYSTEM_PROMPT = """You are a helpful weather assistant. You should ONLY answer questions related to weather, \
meteorology, climate, forecasts, and atmospheric conditions.

If a user asks about topics unrelated to weather, politely redirect them by saying something like: \
"I'm specialized in weather-related questions. Please ask me about weather, forecasts, climate, or \
atmospheric conditions!"

You can discuss:
- Weather forecasts and current conditions
- Climate patterns and phenomena
- Meteorological concepts
- Weather-related safety tips
- Seasonal weather patterns
- Historical weather events

Keep your responses concise and helpful."""


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Runtime configuration for the playground service."""

    anthropic_api_key: str | None = None
    chat_model: str = "claude-3-5-haiku-latest"
    chat_max_tokens: int = 1000
    chat_temperature: float = 0.7
    system_prompt_enabled: bool = True
    system_prompt: str = WEATHER_SYSTEM_PROMPT

    weather_api_url: str = OPEN_METEO_FORECAST_URL
    weather_latitude: float = 40.7128
    weather_longitude: float = -74.006
    weather_location: str = "New York City, NY"

    isr_revalidate_seconds: int = 30
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            chat_model=os.getenv("CHAT_MODEL", defaults.chat_model),
            chat_max_tokens=int(os.getenv("CHAT_MAX_TOKENS", defaults.chat_max_tokens)),
            chat_temperature=float(os.getenv("CHAT_TEMPERATURE", defaults.chat_temperature)),
            system_prompt_enabled=_env_bool("CHAT_SYSTEM_PROMPT_ENABLED", defaults.system_prompt_enabled),
            weather_api_url=os.getenv("WEATHER_API_URL", defaults.weather_api_url),
            weather_latitude=float(os.getenv("WEATHER_LATITUDE", defaults.weather_latitude)),
            weather_longitude=float(os.getenv("WEATHER_LONGITUDE", defaults.weather_longitude)),
            isr_revalidate_seconds=int(os.getenv("ISR_REVALIDATE_SECONDS", defaults.isr_revalidate_seconds)),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
        )

    @property
    def active_system_prompt(self) -> str | None:
        """System prompt to prepend to chat requests, or None when disabled."""
        return self.system_prompt if self.system_prompt_enabled else None

    def anthropic_config(self) -> AnthropicConfig:
        """Client configuration for the completion provider."""
        return AnthropicConfig(
            model=self.chat_model,
            max_tokens=self.chat_max_tokens,
            temperature=self.chat_temperature,
        )
