"""
Utility modules for the Q&A scraper.

This package contains:
- Pure DOM predicates over page snapshots
- Page actions and bounded waits
- Text normalization and keyword matching
- Answer drafting and JSON/CSV output
- Logging setup
"""

from .csv_handler import CSVHandler
from .drafter import add_draft_answers, draft_answer
from .text_processor import TextProcessor, match_keywords, normalize_text, topic_label

__all__ = [
    'CSVHandler',
    'TextProcessor',
    'add_draft_answers',
    'draft_answer',
    'match_keywords',
    'normalize_text',
    'topic_label'
]
