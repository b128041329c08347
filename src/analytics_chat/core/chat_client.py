"""
Chat client for the analytics chat backend.

Sends a question plus a short conversation window to `POST /api/chat` and
returns the answer with its tabular result set and optional column metadata.
Transport failures surface as ChatServiceError with a user-presentable message.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

import requests
import structlog

from analytics_chat.core.field_types import ColumnMetadata, parse_column_metadata
from analytics_chat.core.type_aliases import ResultRow
from analytics_chat.core.values import normalize_rows

logger = structlog.get_logger()

__all__ = ["ChatServiceError", "ChatResponse", "ChatClient", "build_api_history"]

NO_RESPONSE_ANSWER = "No response received"
BACKEND_ERROR_MESSAGE = "Failed to process your request. Please try again."


class ChatServiceError(RuntimeError):
    """Raised when the chat backend cannot be reached or reports an error."""


class HistoryMessage(Protocol):
    role: str
    content: str


@dataclass(frozen=True)
class ChatResponse:
    """
    One backend answer.

    Attributes:
        answer: Assistant text (clarifying question when no answer was given)
        data: Normalized result rows
        columns: Column metadata (may be partial or empty)
        suggested_questions: Follow-up suggestions
        clarifying_question: Question the backend needs answered, if any
        pipeline: Backend query pipeline, kept for the raw response viewer
    """

    answer: str
    data: list[ResultRow] = field(default_factory=list)
    columns: list[ColumnMetadata] = field(default_factory=list)
    suggested_questions: list[str] = field(default_factory=list)
    clarifying_question: str | None = None
    pipeline: list[Any] | None = None

    @classmethod
    def from_api_payload(cls, payload: dict[str, Any]) -> ChatResponse:
        """
        Build a ChatResponse from the decoded JSON body.

        Raises:
            ChatServiceError: If the backend reported status "error"
        """
        if payload.get("status") == "error":
            logger.warning("chat_backend_error", error=payload.get("error"))
            raise ChatServiceError(BACKEND_ERROR_MESSAGE)

        clarifying_question = payload.get("clarifyingQuestion")
        answer = payload.get("answer") or clarifying_question or NO_RESPONSE_ANSWER
        return cls(
            answer=str(answer),
            data=normalize_rows(payload.get("data")),
            columns=parse_column_metadata(payload.get("columns")),
            suggested_questions=[str(q) for q in payload.get("suggestedQuestions") or []],
            clarifying_question=clarifying_question,
            pipeline=payload.get("pipeline"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire-shaped dict, used by the raw response viewer."""
        return {
            "answer": self.answer,
            "data": self.data,
            "columns": [column.to_dict() for column in self.columns],
            "suggestedQuestions": self.suggested_questions,
            "clarifyingQuestion": self.clarifying_question,
            "pipeline": self.pipeline,
        }


def build_api_history(history: Sequence[HistoryMessage], window: int = 5) -> list[dict[str, str]]:
    """
    Convert a transcript to the API history shape.

    Only user/assistant messages are sent, and only the last `window` of them.
    """
    if window <= 0:
        return []
    relevant = [message for message in history if message.role in ("user", "assistant")]
    return [{"role": message.role, "content": message.content} for message in relevant[-window:]]


class ChatClient:
    """
    HTTP client for the analytics chat backend.

    All requests time out after `timeout` seconds.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 30.0,
        history_window: int = 5,
        session: requests.Session | None = None,
    ):
        """
        Initialize chat client.

        Args:
            base_url: Backend base URL (default: http://localhost:8000)
            timeout: Request timeout in seconds (default: 30.0)
            history_window: Number of prior messages sent as context (default: 5)
            session: Optional requests session (connection reuse, testing)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.history_window = history_window
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> ChatClient:
        """Build a client from load_chat_config() output."""
        return cls(
            base_url=config["api_base_url"],
            timeout=config["request_timeout_s"],
            history_window=config["history_window"],
        )

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}/api/chat"

    def send_chat(self, message: str, history: Sequence[HistoryMessage] = ()) -> ChatResponse:
        """
        Ask the backend a question.

        Args:
            message: User question
            history: Prior transcript (only the trailing window is sent)

        Returns:
            ChatResponse

        Raises:
            ChatServiceError: On timeout, connection failure, non-2xx status,
                malformed body, or a backend-reported error
        """
        body = {"message": message, "history": build_api_history(history, self.history_window)}

        try:
            response = self._session.post(self.chat_url, json=body, timeout=self.timeout)
        except requests.Timeout as e:
            logger.warning("chat_request_timeout", timeout_seconds=self.timeout, url=self.chat_url)
            raise ChatServiceError("The analytics server took too long to respond.") from e
        except requests.RequestException as e:
            logger.warning("chat_request_failed", error=str(e), url=self.chat_url)
            raise ChatServiceError("Failed to communicate with the analytics server") from e

        if not response.ok:
            logger.warning("chat_request_rejected", status_code=response.status_code, url=self.chat_url)
            raise ChatServiceError(f"API request failed with status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning("chat_response_malformed", error=str(e))
            raise ChatServiceError("Received an unreadable response from the analytics server") from e

        if not isinstance(payload, dict):
            logger.warning("chat_response_malformed", payload_type=type(payload).__name__)
            raise ChatServiceError("Received an unreadable response from the analytics server")

        chat_response = ChatResponse.from_api_payload(payload)
        logger.debug(
            "chat_response_received",
            rows=len(chat_response.data),
            columns=len(chat_response.columns),
            suggestions=len(chat_response.suggested_questions),
        )
        return chat_response
