"""API endpoints for the weather playground."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app import __version__
from app.models.conversation import ChatRequest, ChatResponse, ErrorResponse, HealthResponse
from app.models.pages import DataCard, PageIndex, RenderStrategy
from app.models.weather import WeatherSnapshot
from app.services.chat import GENERIC_CHAT_ERROR, ChatCompletionError, ChatService
from app.services.rendering import PageRenderer, WeatherFetcher
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


def get_chat_service(request: Request) -> ChatService | None:
    return request.app.state.chat_service


def get_weather_client(request: Request) -> WeatherFetcher:
    return request.app.state.weather_client


def get_page_renderer(request: Request) -> PageRenderer:
    return request.app.state.page_renderer


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _describe_validation_error(error: ValidationError) -> str:
    details = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        details.append(f"{location}: {item['msg']}")
    return "Invalid messages: " + "; ".join(details)


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Chat"],
)
async def chat(request: Request, chat_service: ChatService | None = Depends(get_chat_service)) -> Any:
    """Answer a conversation with one assistant message.

    The body is parsed by hand so that every client error, including a body
    that is not JSON, comes back in the same ``{"error": ...}`` envelope.
    """
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Chat request body is not valid JSON")
        return error_response(400, "Request body must be valid JSON")

    messages = body.get("messages") if isinstance(body, dict) else None
    if not isinstance(messages, list):
        return error_response(400, "Messages array is required")

    try:
        chat_request = ChatRequest.model_validate(body)
    except ValidationError as e:
        logger.warning(f"Chat request validation error: {e.error_count()} errors")
        return error_response(400, _describe_validation_error(e))

    if chat_service is None:
        logger.error("Chat request received but no completion provider is configured")
        return error_response(500, GENERIC_CHAT_ERROR)

    try:
        message = await chat_service.reply(chat_request.messages)
    except ChatCompletionError as e:
        return error_response(500, str(e))

    return ChatResponse(message=message)


@router.get("/api/data", response_model=WeatherSnapshot, tags=["Weather"])
async def weather_data(weather_client: WeatherFetcher = Depends(get_weather_client)) -> WeatherSnapshot:
    """Current weather reading, with placeholder values when the upstream API fails."""
    result = await weather_client.fetch()
    return result.to_snapshot()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
    )


@router.get("/", response_model=PageIndex, tags=["Pages"])
async def index(renderer: PageRenderer = Depends(get_page_renderer)) -> PageIndex:
    return PageIndex(title="Weather Playground", pages=renderer.index())


# Catch-all page route, keep it last
@router.get("/{page}", response_model=DataCard, responses={404: {"description": "Unknown page"}}, tags=["Pages"])
async def render_page(page: str, response: Response, renderer: PageRenderer = Depends(get_page_renderer)) -> DataCard:
    """Render the weather card with the strategy's caching policy."""
    try:
        strategy = RenderStrategy(page)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Page not found: /{page}") from None

    policy = renderer.policies[strategy]
    response.headers["Cache-Control"] = policy.cache_control
    response.headers["X-Render-Runtime"] = policy.runtime
    return await renderer.render(strategy)
