"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# One hour; override with INACTIVITY_THRESHOLD_MS.
DEFAULT_INACTIVITY_THRESHOLD_MS = 60 * 60 * 1000
DEFAULT_CHECK_INTERVAL_SECONDS = 60

TAB_ID_HEADER = "X-Tab-Id"
MAX_TAB_ID_LENGTH = 64

MAX_RECENT_ITEMS = 10
DEFAULT_THEME = "light"
DEFAULT_LANDING_PAGE = "/"

# Upper bound on in-process tab stores; empty stores are dropped first.
DEFAULT_MAX_MEMORY_TABS = 10_000
