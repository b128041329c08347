"""
ConversationManager - Pure Python conversation state management.

UI-agnostic transcript of user and assistant turns. Assistant turns may
carry the ChatResponse they were built from; the active turn is the one
whose chart and table are on screen.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import uuid4

from analytics_chat.core.chat_client import ChatResponse

__all__ = ["Message", "ConversationManager"]

ERROR_PREFIX = "Error: "


@dataclass
class Message:
    """Represents a single message in the conversation transcript."""

    id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime
    response: ChatResponse | None = None  # Result set for assistant turns
    status: Literal["completed", "error"] = "completed"


class ConversationManager:
    """
    Manages conversation state: messages, active turn, suggested questions.

    Pure Python class with zero Streamlit dependencies.
    """

    def __init__(self) -> None:
        """Initialize empty conversation manager."""
        self._messages: list[Message] = []
        self._active_message_id: str | None = None
        self._suggested_questions: list[str] = []
        self._last_user_message: str = ""

    def add_message(
        self,
        role: Literal["user", "assistant"],
        content: str,
        response: ChatResponse | None = None,
        status: Literal["completed", "error"] = "completed",
    ) -> str:
        """
        Add a message to the conversation transcript.

        Args:
            role: Message role ("user" or "assistant")
            content: Message content
            response: Optional ChatResponse for assistant turns
            status: Message status ("completed" or "error")

        Returns:
            Message ID (unique identifier)
        """
        message_id = str(uuid4())
        message = Message(
            id=message_id,
            role=role,
            content=content,
            timestamp=datetime.now(),
            response=response,
            status=status,
        )
        self._messages.append(message)
        if role == "user":
            self._last_user_message = content
        return message_id

    def add_error(self, error_message: str) -> str:
        """Record a failed turn as an assistant error message."""
        self._suggested_questions = []
        return self.add_message("assistant", f"{ERROR_PREFIX}{error_message}", status="error")

    def get_transcript(self) -> list[Message]:
        """
        Get full conversation transcript.

        Returns:
            List of messages in chronological order
        """
        return self._messages.copy()

    def get_message(self, message_id: str) -> Message | None:
        return next((msg for msg in self._messages if msg.id == message_id), None)

    def set_active(self, message_id: str) -> bool:
        """
        Make an assistant turn the active one.

        Only assistant messages carrying a response can be activated; its
        suggested questions become the current suggestions.

        Returns:
            True if the turn was activated
        """
        message = self.get_message(message_id)
        if message is None or message.role != "assistant" or message.response is None:
            return False
        self._active_message_id = message_id
        self._suggested_questions = list(message.response.suggested_questions)
        return True

    def get_active_message_id(self) -> str | None:
        return self._active_message_id

    def get_suggested_questions(self) -> list[str]:
        return self._suggested_questions.copy()

    def get_last_user_message(self) -> str:
        return self._last_user_message

    def history(self) -> list[Message]:
        """User/assistant messages in order, suitable as API history."""
        return self._messages.copy()

    def pop_trailing_error(self) -> Message | None:
        """Remove and return the last message if it is an error, for retry."""
        if self._messages and self._messages[-1].status == "error":
            return self._messages.pop()
        return None

    def pop_last(self) -> Message | None:
        """Remove and return the last message, if any."""
        if not self._messages:
            return None
        message = self._messages.pop()
        if message.id == self._active_message_id:
            self._active_message_id = None
        return message

    def clear(self) -> None:
        """Clear all conversation state (reset to initial state)."""
        self._messages = []
        self._active_message_id = None
        self._suggested_questions = []
        self._last_user_message = ""

    def normalize_query(self, q: str | None) -> str:
        """
        Normalize query text: collapse whitespace, strip.

        Case is preserved since the backend sees the question verbatim.

        Args:
            q: Raw query text (may be None)

        Returns:
            Normalized query string (single spaces, stripped)
        """
        if q is None:
            return ""
        return " ".join(q.strip().split())
