"""
Text Processing Utilities

This module provides centralized text processing functions for normalizing
scraped text, building exact-match labels, matching keywords and deriving
safe file names.
"""

import re
from typing import Iterable, List, Optional

from ..constants import KEYWORDS, TOPIC_LABEL_PREFIX

_WHITESPACE = re.compile(r'\s+')
_UNSAFE_SEGMENT = re.compile(r'[/\\?<>:*|"\'%]')


class TextProcessor:
    """
    Handles text processing operations for scraped content.

    Every method is pure so it can be applied to text read from a live page
    or from a static HTML fixture with the same result.
    """

    @staticmethod
    def normalize_text(text: Optional[str]) -> str:
        """
        Lowercase, collapse whitespace runs to one space and trim.

        Args:
            text: Raw text, possibly None

        Returns:
            str: Normalized text, "" for None or empty input
        """
        if not text:
            return ""

        return _WHITESPACE.sub(' ', text).strip().lower()

    @staticmethod
    def collapse_whitespace(text: Optional[str]) -> str:
        """Collapse whitespace runs to one space and trim, keeping case."""
        if not text:
            return ""

        return _WHITESPACE.sub(' ', text).strip()

    @staticmethod
    def topic_label(topic: Optional[str]) -> str:
        """
        Build the exact suggestion label for a topic.

        Args:
            topic: Topic as typed by the user

        Returns:
            str: "topic: <normalized topic>"
        """
        return TOPIC_LABEL_PREFIX + TextProcessor.normalize_text(topic)

    @staticmethod
    def truncate_text(text: str, max_length: int, suffix: str = "…") -> str:
        """
        Truncate text to max_length characters and append suffix.

        Args:
            text: Text to truncate
            max_length: Number of characters kept before the suffix
            suffix: Suffix to add when truncating

        Returns:
            str: Original text if short enough, else the truncated text
        """
        if not text or len(text) <= max_length:
            return text

        return text[:max_length] + suffix

    @staticmethod
    def match_keywords(text: Optional[str], keywords: Optional[Iterable[str]] = None) -> List[str]:
        """
        Return the keywords contained in text, in keyword order.

        Matching is case-insensitive substring matching.
        """
        haystack = (text or "").lower()
        candidates = KEYWORDS if keywords is None else keywords
        return [k for k in candidates if k.lower() in haystack]

    @staticmethod
    def merge_keywords(topic: str, question: str, keywords: Optional[Iterable[str]] = None) -> List[str]:
        """
        Topic first, then every keyword found in the question, without duplicates.
        """
        merged = [topic]
        seen = {TextProcessor.normalize_text(topic)}
        for keyword in TextProcessor.match_keywords(question, keywords):
            key = TextProcessor.normalize_text(keyword)
            if key not in seen:
                seen.add(key)
                merged.append(keyword)
        return merged

    @staticmethod
    def output_base_name(site: str, topic: str) -> str:
        """Shared base name for the JSON and CSV outputs of one run."""
        return f"{site}_{_WHITESPACE.sub('_', topic).lower()}"

    @staticmethod
    def sanitize_segment(text: str, max_length: int = 80) -> str:
        """
        Make text safe to embed in a file name.

        Path separators and shell-hostile characters become "-", whitespace
        runs become "-", leading/trailing dots and dashes are dropped.
        """
        cleaned = _UNSAFE_SEGMENT.sub('-', text)
        cleaned = _WHITESPACE.sub('-', cleaned)
        cleaned = cleaned.strip('.-')[:max_length]
        return cleaned or "log"


def normalize_text(text: Optional[str]) -> str:
    """Normalize text."""
    return TextProcessor.normalize_text(text)


def topic_label(topic: Optional[str]) -> str:
    """Build the topic suggestion label."""
    return TextProcessor.topic_label(topic)


def match_keywords(text: Optional[str], keywords: Optional[Iterable[str]] = None) -> List[str]:
    """Match keywords in text."""
    return TextProcessor.match_keywords(text, keywords)
