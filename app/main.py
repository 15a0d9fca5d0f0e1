"""Main FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.api.endpoints import router
from app.clients.anthropic import AnthropicClient
from app.clients.open_meteo import OpenMeteoClient
from app.config import Settings
from app.models.llm import CompletionProvider
from app.models.weather import Coordinates
from app.services.chat import ChatService
from app.services.rendering import PageRenderer, WeatherFetcher, build_policies
from app.utils.logging import LogConfig, get_logger, setup_logging

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    completion_provider: CompletionProvider | None = None,
    weather_client: WeatherFetcher | None = None,
) -> FastAPI:
    """Build the application.

    Collaborators that are not passed in are constructed from ``settings``
    when the application starts. Startup also performs the build-time fetch
    of the static page.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(LogConfig(level=settings.log_level))

        http_client: httpx.AsyncClient | None = None
        fetcher = weather_client
        if fetcher is None:
            http_client = httpx.AsyncClient()
            fetcher = OpenMeteoClient(
                http_client,
                base_url=settings.weather_api_url,
                coordinates=Coordinates(settings.weather_latitude, settings.weather_longitude),
                location=settings.weather_location,
            )

        provider = completion_provider
        if provider is None:
            try:
                provider = AnthropicClient(api_key=settings.anthropic_api_key, config=settings.anthropic_config())
            except ValueError as e:
                logger.error(f"Chat is disabled: {e}")

        app.state.weather_client = fetcher
        app.state.chat_service = (
            ChatService(provider, system_prompt=settings.active_system_prompt) if provider is not None else None
        )
        app.state.page_renderer = PageRenderer(fetcher, build_policies(settings.isr_revalidate_seconds))

        await app.state.page_renderer.prerender()
        logger.info(f"Weather playground {__version__} started")
        try:
            yield
        finally:
            await app.state.page_renderer.aclose()
            if http_client is not None:
                await http_client.aclose()

    app = FastAPI(
        title="Weather Playground",
        description=(
            "Live weather data served through four rendering strategies, "
            "plus a weather-only chat assistant."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "Chat",
                "description": "Forward a conversation to the weather assistant.",
            },
            {
                "name": "Weather",
                "description": "Raw weather reading for the configured location.",
            },
            {
                "name": "Pages",
                "description": "The weather card rendered with each caching strategy.",
            },
            {
                "name": "Health",
                "description": "Service health monitoring and status checks.",
            },
        ],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
