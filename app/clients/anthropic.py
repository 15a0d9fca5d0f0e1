"""Anthropic API client used as the chat completion provider."""

import os
from dataclasses import dataclass
from typing import Any, Literal

from anthropic import AsyncAnthropic
from anthropic.types import Message
from pydantic import BaseModel

from app.models.conversation import ChatMessage
from app.models.llm import LLMResponse, LLMUsage
from app.utils.logging import get_logger

logger = get_logger(__name__)


class AnthropicMessage(BaseModel):
    """Message format for Anthropic API."""

    role: Literal["user", "assistant"]
    content: str


@dataclass
class AnthropicConfig:
    """Configuration for Anthropic API client."""

    model: str = "claude-3-5-haiku-latest"
    max_tokens: int = 1000
    temperature: float = 0.7
    # Failures go straight back to the caller
    max_retries: int = 0


class AnthropicClient:
    """Completion provider backed by the Anthropic Messages API."""

    api_key: str
    client: AsyncAnthropic
    config: AnthropicConfig

    def __init__(
        self,
        api_key: str | None = None,
        config: AnthropicConfig | None = None,
        client: AsyncAnthropic | None = None,
    ):
        """Initialize Anthropic client.

        Args:
            api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY env var)
            config: Client configuration
            client: Pre-built SDK client, mainly for tests
        """
        anthropic_api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable is required")

        self.api_key = anthropic_api_key
        self.config = config or AnthropicConfig()
        self.client = client or AsyncAnthropic(api_key=self.api_key, max_retries=self.config.max_retries)

    async def complete(self, messages: list[ChatMessage], **kwargs: Any) -> LLMResponse:
        """Send a conversation and return the assistant's reply.

        Leading system messages are joined into the request's system prompt,
        the rest are sent as the message list. Streaming is disabled.

        Args:
            messages: Conversation, system messages first
            **kwargs: Overrides for model, max_tokens or temperature

        Returns:
            Provider-agnostic response
        """
        system_prompt, conversation = self.split_system_prompt(messages)

        request_params: dict[str, Any] = {
            "model": kwargs.get("model", self.config.model),
            "max_tokens": kwargs.get("max_tokens", self.config.max_tokens),
            "temperature": kwargs.get("temperature", self.config.temperature),
            "messages": [msg.model_dump() for msg in conversation],
            "stream": False,
        }
        if system_prompt:
            request_params["system"] = system_prompt

        logger.debug(f"Making Anthropic API call with model: {request_params['model']}, {len(conversation)} messages")
        response: Message = await self.client.messages.create(**request_params)

        usage = None
        if response.usage:
            usage = LLMUsage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
            )

        text = "".join(block.text for block in response.content if block.type == "text")
        logger.debug(f"Response received - Stop reason: {response.stop_reason}, {len(text)} characters")

        return LLMResponse(
            text=text,
            stop_reason=response.stop_reason,
            usage=usage,
            model=response.model,
        )

    @staticmethod
    def split_system_prompt(messages: list[ChatMessage]) -> tuple[str | None, list[AnthropicMessage]]:
        """Separate the leading system messages from the rest of the conversation.

        Raises:
            ValueError: If a system message follows a user or assistant message
        """
        system_parts: list[str] = []
        conversation: list[AnthropicMessage] = []

        for message in messages:
            if message.role == "system":
                if conversation:
                    raise ValueError("System messages must come before the rest of the conversation")
                system_parts.append(message.content)
            else:
                conversation.append(AnthropicMessage(role=message.role, content=message.content))

        return ("\n\n".join(system_parts) or None), conversation
