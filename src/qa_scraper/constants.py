"""
Constants and configuration values for the Q&A topic scraper.

This module centralizes timeouts, pauses, markers and default paths so the
adapter, the page actions and the CLI all read the same numbers.
"""

# Bounded waits, in milliseconds
TIMEOUTS = {
    'login_inputs': 30000,
    'submit_enabled': 5000,
    'post_login_navigation': 60000,
    'search_form': 30000,
    'suggestions': 10000,
    'redirect': 10000,
    'ready_state': 5000,
    'question_list': 30000,
    'element_visible': 5000,
    'click': 3000,
    'page_load': 60000,
    'poll_interval': 100
}

# Pagination loop pacing
COLLECTION = {
    'expand_settle_ms': 1000,
    'no_progress_pause_ms': 400,
    'scroll_pause_ms': 300,
    'scroll_ratio': 0.9,
    'max_idle_rounds': 3
}

# Human-paced typing delay between keystrokes
TYPING_DELAY_MS = 40

# Normalized text of the toggle that expands a truncated question card
EXPAND_MARKER = "(more)"

# Prefix used by the search suggestion list for topic entries
TOPIC_LABEL_PREFIX = "topic: "

# Default keywords matched against collected question text
KEYWORDS = [
    "funding",
    "growth hacking",
    "artificial intelligence startups"
]

# Drafting
DRAFT = {
    'max_context_chars': 140,
    'fallback_focus': 'the topic'
}

# CSV column order for persisted question rows
CSV_COLUMNS = ['question', 'url', 'matched_keywords', 'drafted_answer', 'timestamp']

# Separator used to flatten matched keywords into a single CSV cell
KEYWORD_SEPARATOR = "|"

# File Paths and Names
DEFAULT_PATHS = {
    'config_file': 'config/settings.json',
    'logs_dir': 'logs',
    'output_dir': 'output'
}

# Hosted browser sessions
HYPERBROWSER = {
    'api_base': 'https://app.hyperbrowser.ai/api',
    'request_timeout': 30
}

SUPPORTED_DRIVERS = ['local', 'hyper']
SUPPORTED_SITES = ['quora']

# Interactive prompt defaults
PROMPT_DEFAULTS = {
    'driver': 'local',
    'site': 'quora',
    'topic': 'Growth Hacking',
    'limit': 10
}
