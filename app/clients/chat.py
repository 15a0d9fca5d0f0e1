"""HTTP client that keeps a conversation with the chat endpoint."""

import httpx

from app.models.conversation import ChatMessage
from app.utils.logging import get_logger

logger = get_logger(__name__)

FALLBACK_REPLY = "Sorry, I encountered an error. Please try again."


class ChatClient:
    """Conversation state plus the call to ``POST /api/chat``.

    The conversation lives only in this object. Each send posts the whole
    history; a failed request is answered locally with ``FALLBACK_REPLY``.
    """

    def __init__(self, base_url: str = "http://localhost:8000", http_client: httpx.Client | None = None):
        self.base_url = base_url.rstrip("/")
        self.client = http_client or httpx.Client(timeout=60.0)
        self.messages: list[ChatMessage] = []

    def send(self, text: str) -> ChatMessage | None:
        """Append a user message, ask the endpoint, and append the reply.

        Args:
            text: What the user typed

        Returns:
            The assistant message that was appended, or None for blank input
        """
        if not text.strip():
            return None

        self.messages.append(ChatMessage(role="user", content=text))
        payload = {"messages": [message.model_dump() for message in self.messages]}

        try:
            response = self.client.post(f"{self.base_url}/api/chat", json=payload)
            data = response.json()
            if response.is_error:
                raise RuntimeError(data.get("error") or f"Chat request failed with {response.status_code}")
            reply = ChatMessage(role="assistant", content=data["message"])
        except Exception as e:
            logger.error(f"Chat error: {e}")
            reply = ChatMessage(role="assistant", content=FALLBACK_REPLY)

        self.messages.append(reply)
        return reply

    def clear(self) -> None:
        """Forget the conversation."""
        self.messages = []

    def close(self) -> None:
        self.client.close()
