"""Chart Heuristic Configuration Constants.

Single source of truth for the cardinality bounds, row limits and label
thresholds used by field selection and chart planning.
These are domain config, not code - adjust without touching the planners.
"""

# Categorical axis cardinality (distinct values, inclusive)
MIN_CATEGORY_VALUES = 2
MAX_CATEGORY_VALUES = 50
MAX_NUMERIC_CATEGORY_VALUES = 20  # Numeric codes as categories: weaker signal, capped lower

# Row count gates
MIN_CHART_ROWS = 2
MAX_CHART_ROWS = 200  # Above this, table only

# Display truncation (non-time-series charts only)
DEFAULT_CHART_LIMIT = 10
CHART_LIMIT_STEPS = (10, 20, 30, 50, 100)
SHOW_MORE_STEP = 20

# Chart type selection
LONG_LABEL_CHARS = 25
GROUPED_BAR_MAX_ROWS = 12
HORIZONTAL_BAR_MAX_ROWS = 40

# Tooltip enrichment
MAX_TOOLTIP_CONTEXT_FIELDS = 5

# Table view
DEFAULT_ROWS_PER_PAGE = 10
ROWS_PER_PAGE_OPTIONS = (10, 25, 50, 100)
