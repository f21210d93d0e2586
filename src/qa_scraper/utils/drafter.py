"""
Answer drafting for collected questions.

Drafts are short placeholders meant for a human to review; nothing is ever
posted back to the site.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..constants import DRAFT
from .text_processor import TextProcessor


def draft_answer(question: str, matched_keywords: Sequence[str]) -> str:
    """Draft text naming the matched keywords and quoting the question."""
    focus = ", ".join(matched_keywords) if matched_keywords else DRAFT['fallback_focus']
    brief = TextProcessor.truncate_text(question, DRAFT['max_context_chars'])
    return f"Short draft (do not post): perspective on {focus}. Context: “{brief}”."


def add_draft_answers(items: Iterable[Any], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """
    Annotate question records with a drafted answer and a timestamp.

    Args:
        items: QuestionRecord objects or dicts with question/url/matched_keywords
        now: Timestamp to stamp on every row (defaults to the current UTC time)

    Returns:
        List of plain dicts ready for persistence
    """
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    rows = []
    for item in items:
        row = item.to_dict() if hasattr(item, 'to_dict') else dict(item)
        row['drafted_answer'] = draft_answer(row['question'], row.get('matched_keywords') or [])
        row['timestamp'] = stamp
        rows.append(row)
    return rows
