"""
Q&A Topic Scraper Package

Logs in to a Q&A site, picks a topic from the search suggestions, collects
the topic's questions and drafts short answers for human review.
"""

__version__ = "1.0.0"
__author__ = "Q&A Scraper Team"

from .scraper.base import BaseSiteAdapter, Capability, QuestionRecord
from .scraper.quora import QuoraAdapter
from .scraper.registry import get_adapter
from .scraper.runner import run_workflow
from .utils.csv_handler import CSVHandler
from .utils.text_processor import TextProcessor

__all__ = [
    'BaseSiteAdapter',
    'Capability',
    'QuestionRecord',
    'QuoraAdapter',
    'get_adapter',
    'run_workflow',
    'CSVHandler',
    'TextProcessor'
]
