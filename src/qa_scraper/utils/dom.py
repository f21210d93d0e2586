"""
Pure DOM predicates.

Every function takes an explicit document (a BeautifulSoup tree) so the same
code answers questions about a static HTML fixture and about a snapshot of
the live page taken with ``page.content()``. Nothing here raises for a
missing element; absence is reported as False, 0, None or an empty list.
"""

from typing import Dict, Iterable, List, Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from .text_processor import TextProcessor

Document = Union[BeautifulSoup, Tag]


def parse_document(html: Optional[str]) -> BeautifulSoup:
    """Build a document context from markup."""
    return BeautifulSoup(html or "", "html.parser")


def _first(selector: str, doc: Document) -> Optional[Tag]:
    return doc.select_one(selector)


def has_login_form(email_sel: str, pass_sel: str, submit_sel: str, doc: Document) -> bool:
    """True iff the email, password and submit selectors all resolve."""
    return bool(_first(email_sel, doc) and _first(pass_sel, doc) and _first(submit_sel, doc))


def is_submit_enabled(submit_sel: str, doc: Document) -> bool:
    """
    Whether the first submit control is clickable.

    False when there is no match, when the element carries ``disabled``,
    or when ``aria-disabled`` is exactly ``"true"``.
    """
    button = _first(submit_sel, doc)
    if button is None:
        return False
    if button.has_attr('disabled'):
        return False
    return button.get('aria-disabled') != "true"


def has_search_form(search_sel: str, doc: Document) -> bool:
    return _first(search_sel, doc) is not None


def has_questions(question_sel: str, doc: Document) -> bool:
    return _first(question_sel, doc) is not None


def count_matches(selector: str, doc: Document) -> int:
    return len(doc.select(selector))


def element_text(element: Tag) -> str:
    """Normalized (lowercased, collapsed) text of an element."""
    return TextProcessor.normalize_text(element.get_text())


def find_by_text(selector: str, want: str, doc: Document) -> Optional[Tag]:
    """First element matching selector whose normalized text equals want exactly."""
    for element in doc.select(selector):
        if element_text(element) == want:
            return element
    return None


def _resolve_link(node: Tag, container: Tag) -> Optional[str]:
    """href of the nearest enclosing link, else of the first descendant link."""
    if node.name == 'a' and node.get('href'):
        return node['href']
    enclosing = node.find_parent('a', href=True)
    if enclosing is not None:
        return enclosing['href']
    descendant = container.select_one('a[href]')
    if descendant is not None:
        return descendant['href']
    return None


def _absolute(href: Optional[str], base_url: Optional[str]) -> str:
    href = (href or "").strip()
    if not href:
        return ""
    return urljoin(base_url, href) if base_url else href


def resolve_suggestion_href(suggestion_sel: str, want: str, doc: Document,
                            base_url: Optional[str] = None) -> Optional[str]:
    """Link target of the suggestion labelled exactly ``want``, if any."""
    match = find_by_text(suggestion_sel, want, doc)
    if match is None:
        return None
    return _absolute(_resolve_link(match, match), base_url) or None


def extract_question_batch(item_sel: str, doc: Document,
                           title_fallbacks: Iterable[str] = (),
                           base_url: Optional[str] = None) -> List[Dict[str, str]]:
    """
    Extract ``{question, url}`` pairs from every element matching item_sel.

    The title node is the first hit of ``title_fallbacks`` inside the item,
    falling back to the item itself. Items without a non-empty question or
    a non-empty url are dropped, never returned half-filled.
    """
    fallbacks = list(title_fallbacks)
    batch = []
    for item in doc.select(item_sel):
        title = None
        for inner in fallbacks:
            title = item.select_one(inner)
            if title is not None and TextProcessor.collapse_whitespace(title.get_text()):
                break
            title = None
        if title is None:
            title = item

        question = TextProcessor.collapse_whitespace(title.get_text())
        url = _absolute(_resolve_link(title, item), base_url)
        if not question or not url:
            continue
        batch.append({'question': question, 'url': url})
    return batch
