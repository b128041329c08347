"""
UI Messages - Centralized message constants.

Simple module-level constants for consistent UI messaging.
Keep it lightweight - no classes or complex structures.
"""

# Empty conversation
WELCOME = "Ask a question about purchase orders to get started."
STARTER_QUESTIONS = (
    "What are the top 10 departments by total spending?",
    "How has spending changed by fiscal year?",
    "Which suppliers received the most purchase orders?",
    "Show total spending by acquisition type",
)

# Chat
CHAT_INPUT_PLACEHOLDER = "Ask about spending, suppliers, departments..."
THINKING = "💭 Thinking..."
RETRY = "🔄 Retry"
CLEAR_CONVERSATION = "🗑️ Clear Conversation"
SUGGESTED_QUESTIONS = "💡 Suggested questions"
SHOW_RESULTS = "📊 Show results"
ACTIVE_RESULTS = "Showing these results"

# Results
NO_DATA = "No data returned for this question."
NO_ACTIVE_RESULT = "Select an answer to see its chart and table."
CHART_UNAVAILABLE = "Chart unavailable: {reason}"
CHART_SHOWING = "Showing {shown} of {total}"
SHOW_MORE = "Show more"
POINT_DETAILS = "🔎 Data point details"
POINT_SELECT = "Data point"
RAW_RESPONSE = "🧾 Raw response"
RAW_RESPONSE_TOGGLE = "Show raw response"

# Table
TABLE_EMPTY = "No rows to display."
PREVIOUS_PAGE = "← Previous"
NEXT_PAGE = "Next →"
