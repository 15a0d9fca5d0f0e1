"""LLM-related data models and types (provider-agnostic)."""

from dataclasses import dataclass
from typing import Protocol

from app.models.conversation import ChatMessage


@dataclass
class LLMUsage:
    """Token usage information from LLM provider."""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class LLMResponse:
    """Provider-agnostic response from a completion call."""

    text: str
    stop_reason: str | None
    usage: LLMUsage | None
    model: str
    provider: str = "anthropic"


class CompletionProvider(Protocol):
    """Anything that can turn a conversation into one assistant reply."""

    async def complete(self, messages: list[ChatMessage]) -> LLMResponse: ...
