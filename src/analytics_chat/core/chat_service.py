"""
ChatService - Pure Python orchestration of chat turns.

Ties the chat client, conversation transcript and per-turn view settings
together so the Streamlit page only renders. Zero Streamlit dependencies.
"""

from dataclasses import dataclass

import structlog

from analytics_chat.core.chart_planner import ChartPlan, build_chart_plan
from analytics_chat.core.chat_client import ChatClient, ChatResponse, ChatServiceError
from analytics_chat.core.conversation_manager import ConversationManager
from analytics_chat.core.normalizer import flatten_rows
from analytics_chat.core.table_engine import TableView, build_table_view
from analytics_chat.core.view_settings import ViewSettings, ViewSettingsStore

logger = structlog.get_logger()

__all__ = ["TurnResult", "TurnView", "ChatService"]


@dataclass
class TurnResult:
    """Outcome of one question."""

    message_id: str | None  # Assistant message ID (None if the question was empty)
    response: ChatResponse | None
    error: str | None = None


@dataclass(frozen=True)
class TurnView:
    """Chart plan and table page for one turn, built from its settings."""

    turn_id: str
    response: ChatResponse
    settings: ViewSettings
    chart: ChartPlan
    table: TableView


class ChatService:
    """
    Runs chat turns and derives their views.

    Each assistant turn gets its own ViewSettings; views are recomputed from
    (response, settings) on demand and never cached across turns.
    """

    def __init__(
        self,
        client: ChatClient,
        conversation: ConversationManager | None = None,
        settings_store: ViewSettingsStore | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            client: ChatClient for the backend
            conversation: Transcript (new one if omitted)
            settings_store: Per-turn view settings (new one if omitted)
        """
        self.client = client
        self.conversation = conversation or ConversationManager()
        self.settings_store = settings_store or ViewSettingsStore()

    def ask(self, question: str) -> TurnResult:
        """
        Send a question and record both sides of the turn.

        Backend failures become an error message in the transcript rather
        than an exception.
        """
        normalized = self.conversation.normalize_query(question)
        if not normalized:
            return TurnResult(message_id=None, response=None, error="Question cannot be empty")

        history = self.conversation.history()
        self.conversation.add_message("user", normalized)

        try:
            response = self.client.send_chat(normalized, history)
        except ChatServiceError as e:
            logger.warning("chat_turn_failed", error=str(e))
            message_id = self.conversation.add_error(str(e))
            return TurnResult(message_id=message_id, response=None, error=str(e))

        message_id = self.conversation.add_message("assistant", response.answer, response=response)
        self.conversation.set_active(message_id)
        self.settings_store.ensure(message_id)
        logger.info("chat_turn_completed", message_id=message_id, rows=len(response.data))
        return TurnResult(message_id=message_id, response=response)

    def retry(self) -> TurnResult | None:
        """
        Resend the last question after a failure.

        Returns:
            TurnResult, or None if the last turn did not fail
        """
        failed = self.conversation.pop_trailing_error()
        last_question = self.conversation.get_last_user_message()
        if failed is None or not last_question:
            return None

        # Drop the user message too; ask() records it again
        transcript = self.conversation.get_transcript()
        if transcript and transcript[-1].role == "user":
            self.conversation.pop_last()
        return self.ask(last_question)

    def select_turn(self, message_id: str) -> bool:
        """Activate a previous assistant turn, keeping its own view settings."""
        if not self.conversation.set_active(message_id):
            return False
        self.settings_store.ensure(message_id)
        return True

    def clear(self) -> None:
        self.conversation.clear()
        self.settings_store.clear()

    def view_for(self, turn_id: str) -> TurnView | None:
        """
        Build the chart plan and table view of a turn from its settings.

        Returns:
            TurnView, or None if the turn has no result set
        """
        message = self.conversation.get_message(turn_id)
        if message is None or message.response is None:
            return None

        settings = self.settings_store.get(turn_id)
        flattened = flatten_rows(message.response.data)
        metadata = message.response.columns
        return TurnView(
            turn_id=turn_id,
            response=message.response,
            settings=settings,
            chart=build_chart_plan(flattened, metadata, settings.chart_limit),
            table=build_table_view(flattened, settings.table, metadata),
        )

    def active_view(self) -> TurnView | None:
        turn_id = self.conversation.get_active_message_id()
        return self.view_for(turn_id) if turn_id else None
