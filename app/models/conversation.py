"""Chat conversation and API envelope models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, field_validator


class ChatMessage(BaseModel):
    """A single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    """Request model for the chat endpoint."""

    messages: list[ChatMessage]

    @field_validator("messages")
    @classmethod
    def check_conversation_order(cls, messages: list[ChatMessage]) -> list[ChatMessage]:
        """Reject empty conversations and system messages after the opening ones."""
        if not messages:
            raise ValueError("conversation must contain at least one message")

        seen_non_system = False
        for index, message in enumerate(messages):
            if message.role != "system":
                seen_non_system = True
            elif seen_non_system:
                raise ValueError(f"system message at position {index} must precede user and assistant messages")

        if not seen_non_system:
            raise ValueError("conversation must contain a user or assistant message")
        return messages


class ChatResponse(BaseModel):
    """Response model for a successful chat completion."""

    message: str


class ErrorResponse(BaseModel):
    """Error envelope shared by the API endpoints."""

    error: str


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str
