"""Chat service forwarding conversations to the completion provider."""

from app.models.conversation import ChatMessage
from app.models.llm import CompletionProvider
from app.utils.logging import get_logger

logger = get_logger(__name__)

GENERIC_CHAT_ERROR = "Failed to process chat request"


class ChatCompletionError(Exception):
    """The completion provider could not produce a reply."""


class ChatService:
    """Service for answering a conversation with one assistant message."""

    def __init__(self, provider: CompletionProvider, system_prompt: str | None = None):
        """Initialize chat service.

        Args:
            provider: Completion provider the conversation is forwarded to
            system_prompt: Prepended as a system message when set
        """
        self.provider = provider
        self.system_prompt = system_prompt

    def build_messages(self, messages: list[ChatMessage]) -> list[ChatMessage]:
        """Return the conversation as sent to the provider."""
        if self.system_prompt is None:
            return list(messages)
        return [ChatMessage(role="system", content=self.system_prompt), *messages]

    async def reply(self, messages: list[ChatMessage]) -> str:
        """Generate the assistant reply for a conversation.

        Raises:
            ChatCompletionError: On any provider failure
        """
        outgoing = self.build_messages(messages)
        logger.info(f"Forwarding {len(outgoing)} messages (system prompt: {self.system_prompt is not None})")

        try:
            response = await self.provider.complete(outgoing)
        except Exception as e:
            logger.error(f"Completion provider error: {e}", exc_info=True)
            message = getattr(e, "message", None) or str(e) or GENERIC_CHAT_ERROR
            raise ChatCompletionError(message) from e

        if response.usage:
            logger.info(
                f"Token usage - Input: {response.usage.input_tokens}, Output: {response.usage.output_tokens}"
            )
        return response.text
