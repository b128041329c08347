"""
Chat panel - transcript, question buttons and the active turn's results.

render_transcript() is the ONLY function that calls st.chat_message(); the
transcript is always rendered from ChatService state, never from control flow.
"""

from __future__ import annotations

import streamlit as st

from analytics_chat.core.chat_service import ChatService, TurnView
from analytics_chat.core.conversation_manager import Message
from analytics_chat.ui.components.chart_renderer import render_chart
from analytics_chat.ui.components.table_renderer import render_table
from analytics_chat.ui.messages import (
    ACTIVE_RESULTS,
    NO_ACTIVE_RESULT,
    NO_DATA,
    RAW_RESPONSE,
    RETRY,
    SHOW_RESULTS,
    STARTER_QUESTIONS,
    SUGGESTED_QUESTIONS,
    WELCOME,
)

PREFILLED_QUESTION_KEY = "prefilled_question"


def _queue_question(question: str) -> None:
    """Submit a question on the next rerun."""
    st.session_state[PREFILLED_QUESTION_KEY] = question
    st.rerun()


def _render_assistant(service: ChatService, message: Message, is_last: bool) -> None:
    if message.status == "error":
        st.error(f"❌ {message.content}")
        if is_last and st.button(RETRY, key=f"retry_{message.id}"):
            service.retry()
            st.rerun()
        return

    st.markdown(message.content)
    if message.response is None or not message.response.data:
        return

    if service.conversation.get_active_message_id() == message.id:
        st.caption(f"📌 {ACTIVE_RESULTS}")
    elif st.button(SHOW_RESULTS, key=f"select_{message.id}"):
        service.select_turn(message.id)
        st.rerun()


def render_transcript(service: ChatService) -> None:
    """Render the whole conversation from service state."""
    transcript = service.conversation.get_transcript()
    if not transcript:
        st.info(WELCOME)
        render_question_buttons(STARTER_QUESTIONS, key_prefix="starter")
        return

    for index, message in enumerate(transcript):
        with st.chat_message(message.role):
            if message.role == "user":
                st.write(message.content)
            else:
                _render_assistant(service, message, is_last=index == len(transcript) - 1)


def render_question_buttons(questions: list[str] | tuple[str, ...], key_prefix: str) -> None:
    """Clickable questions, three per row."""
    if not questions:
        return
    cols = st.columns(min(len(questions), 3))
    for idx, question in enumerate(questions):
        with cols[idx % 3]:
            if st.button(question, key=f"{key_prefix}_{idx}", use_container_width=True):
                _queue_question(question)


def render_suggestions(service: ChatService) -> None:
    questions = service.conversation.get_suggested_questions()
    if not questions:
        return
    st.markdown("---")
    st.subheader(SUGGESTED_QUESTIONS)
    render_question_buttons(questions, key_prefix="suggested")


def render_results(service: ChatService, show_raw_response: bool) -> None:
    """Chart, table and optional raw JSON for the active turn."""
    view: TurnView | None = service.active_view()
    if view is None:
        if service.conversation.get_transcript():
            st.caption(NO_ACTIVE_RESULT)
        return

    if not view.response.data:
        st.info(NO_DATA)
    else:
        render_chart(view.chart, view.response.columns, service.settings_store, view.turn_id)
        render_table(view.table, service.settings_store, view.turn_id)

    if show_raw_response:
        with st.expander(RAW_RESPONSE, expanded=False):
            st.json(view.response.to_dict())


def pop_prefilled_question() -> str | None:
    """Question queued by a button click, consumed once."""
    return st.session_state.pop(PREFILLED_QUESTION_KEY, None)
