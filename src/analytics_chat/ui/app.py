"""
Analytics Chat - Streamlit UI

Ask questions about procurement data; answers come back with a chart and a
sortable, paginated table of the result set.
"""

import sys
from pathlib import Path

import streamlit as st

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

# Configure logging ONCE at entry point (not in components)
from analytics_chat.ui.config import APP_SUBTITLE, APP_TITLE, LOG_LEVEL, SHOW_RAW_RESPONSE  # noqa: E402
from analytics_chat.ui.logging_config import configure_logging  # noqa: E402

configure_logging(LOG_LEVEL)

# Imports after logging config (intentional - logging must be configured first)
from analytics_chat.core.chat_client import ChatClient  # noqa: E402
from analytics_chat.core.chat_service import ChatService  # noqa: E402
from analytics_chat.core.config_loader import load_chat_config  # noqa: E402
from analytics_chat.ui.components.chat_panel import (  # noqa: E402
    pop_prefilled_question,
    render_results,
    render_suggestions,
    render_transcript,
)
from analytics_chat.ui.messages import CHAT_INPUT_PLACEHOLDER, CLEAR_CONVERSATION, RAW_RESPONSE_TOGGLE, THINKING  # noqa: E402

SERVICE_KEY = "chat_service"


def get_service() -> ChatService:
    """ChatService for this browser session, created on first use."""
    if SERVICE_KEY not in st.session_state:
        st.session_state[SERVICE_KEY] = ChatService(ChatClient.from_config(load_chat_config()))
    return st.session_state[SERVICE_KEY]


def main():
    st.set_page_config(page_title=APP_TITLE, page_icon="📊", layout="wide")
    st.title(f"📊 {APP_TITLE}")
    st.caption(APP_SUBTITLE)

    service = get_service()

    with st.sidebar:
        show_raw_response = st.toggle(RAW_RESPONSE_TOGGLE, value=SHOW_RAW_RESPONSE)
        if st.button(CLEAR_CONVERSATION, use_container_width=True):
            service.clear()
            st.rerun()

    chat_col, results_col = st.columns([2, 3])

    with chat_col:
        render_transcript(service)
        render_suggestions(service)

    question = st.chat_input(CHAT_INPUT_PLACEHOLDER) or pop_prefilled_question()
    if question:
        with chat_col, st.spinner(THINKING):
            service.ask(question)
        st.rerun()

    with results_col:
        render_results(service, show_raw_response)


if __name__ == "__main__":
    main()
