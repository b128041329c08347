"""Tests for ChatService - turn orchestration and per-turn views."""

from unittest.mock import MagicMock

import pytest

from analytics_chat.core.chart_planner import ChartType
from analytics_chat.core.chat_client import ChatClient, ChatResponse, ChatServiceError
from analytics_chat.core.chat_service import ChatService
from analytics_chat.core.table_engine import TableSettings


def _response(data: list[dict], **overrides) -> ChatResponse:
    values = {"answer": "Here you go", "data": data, "suggested_questions": ["Next?"]}
    values.update(overrides)
    return ChatResponse(**values)


@pytest.fixture
def client():
    return MagicMock(spec=ChatClient)


@pytest.fixture
def service(client):
    return ChatService(client)


class TestChatServiceAsk:
    """Asking questions."""

    def test_ask_success_records_turn_and_activates_it(self, service, client, grouped_dept_rows):
        # Arrange
        client.send_chat.return_value = _response(grouped_dept_rows)

        # Act
        result = service.ask("  Spend by   department ")

        # Assert
        assert result.error is None
        transcript = service.conversation.get_transcript()
        assert [m.role for m in transcript] == ["user", "assistant"]
        assert transcript[0].content == "Spend by department"
        assert service.conversation.get_active_message_id() == result.message_id
        assert result.message_id in service.settings_store
        assert service.conversation.get_suggested_questions() == ["Next?"]

    def test_ask_sends_prior_history_without_current_question(self, service, client, grouped_dept_rows):
        # Arrange
        client.send_chat.return_value = _response(grouped_dept_rows)
        service.ask("first")

        # Act
        service.ask("second")

        # Assert
        message, history = client.send_chat.call_args.args
        assert message == "second"
        assert [m.content for m in history] == ["first", "Here you go"]

    def test_ask_empty_question_is_rejected_without_calling_backend(self, service, client):
        # Act
        result = service.ask("   ")

        # Assert
        assert result.error == "Question cannot be empty"
        assert result.message_id is None
        client.send_chat.assert_not_called()
        assert service.conversation.get_transcript() == []

    def test_ask_backend_failure_records_error_message(self, service, client):
        # Arrange
        client.send_chat.side_effect = ChatServiceError("API request failed with status 500")

        # Act
        result = service.ask("q")

        # Assert
        assert result.error == "API request failed with status 500"
        last = service.conversation.get_transcript()[-1]
        assert last.status == "error"
        assert last.content == "Error: API request failed with status 500"


class TestChatServiceRetry:
    """Retrying failed turns."""

    def test_retry_resends_last_question_and_replaces_error(self, service, client, grouped_dept_rows):
        # Arrange
        client.send_chat.side_effect = [ChatServiceError("boom"), _response(grouped_dept_rows)]
        service.ask("Spend by department")

        # Act
        result = service.retry()

        # Assert
        assert result.error is None
        transcript = service.conversation.get_transcript()
        assert [(m.role, m.status) for m in transcript] == [("user", "completed"), ("assistant", "completed")]
        assert client.send_chat.call_count == 2

    def test_retry_without_failure_returns_none(self, service, client, grouped_dept_rows):
        client.send_chat.return_value = _response(grouped_dept_rows)
        service.ask("q")
        assert service.retry() is None


class TestChatServiceViews:
    """Per-turn chart and table views."""

    def test_active_view_builds_chart_and_table(self, service, client, grouped_dept_rows, dept_metadata):
        # Arrange
        client.send_chat.return_value = _response(grouped_dept_rows, columns=dept_metadata)
        service.ask("q")

        # Act
        view = service.active_view()

        # Assert
        assert view.chart.chart_type is ChartType.BAR
        assert view.table.cells == (("$100.00", "A"), ("$50.00", "B"))

    def test_view_settings_are_independent_per_turn(self, service, client):
        # Arrange
        rows = [{"dept": f"D{i}", "total": i} for i in range(40)]
        client.send_chat.return_value = _response(rows)
        first = service.ask("first").message_id
        second = service.ask("second").message_id

        # Act
        service.settings_store.set_chart_limit(first, 30)
        service.settings_store.set_table(second, TableSettings(page=2))

        # Assert
        assert service.view_for(first).chart.displayed_row_count == 30
        assert service.view_for(first).table.page == 1
        assert service.view_for(second).chart.displayed_row_count == 10
        assert service.view_for(second).table.page == 2

    def test_select_turn_switches_active_view(self, service, client, grouped_dept_rows):
        # Arrange
        client.send_chat.return_value = _response(grouped_dept_rows)
        first = service.ask("first").message_id
        service.ask("second")

        # Act
        selected = service.select_turn(first)

        # Assert
        assert selected
        assert service.active_view().turn_id == first

    def test_view_for_user_message_returns_none(self, service, client, grouped_dept_rows):
        client.send_chat.return_value = _response(grouped_dept_rows)
        service.ask("q")
        user_message = service.conversation.get_transcript()[0]
        assert service.view_for(user_message.id) is None

    def test_clear_resets_conversation_and_settings(self, service, client, grouped_dept_rows):
        # Arrange
        client.send_chat.return_value = _response(grouped_dept_rows)
        service.ask("q")

        # Act
        service.clear()

        # Assert
        assert service.conversation.get_transcript() == []
        assert len(service.settings_store) == 0
        assert service.active_view() is None
