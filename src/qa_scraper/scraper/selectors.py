"""
CSS selector contracts, one per supported site.

A SelectorSet is pure data: the adapter picks one at construction and never
mutates it. Bump ``version`` whenever a site's markup forces a change so
logs show which contract a run used.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class SelectorSet:
    site: str
    version: str
    email_input: str
    password_input: str
    submit_control: str
    search_input: str
    suggestion_item: str
    question_card: str
    question_item: str
    # Inner title lookups for a question item, most specific first
    title_fallbacks: Tuple[str, ...] = ()


QUORA_SELECTORS = SelectorSet(
    site='quora',
    version='2024.1',
    email_input='input[name="email"], input[type="email"]',
    password_input='input[name="password"][type="password"], input[type="password"]',
    submit_control='button[type="button"], input[type="submit"], button[type="submit"]',
    search_input='input[type="text"][enterkeyhint="search"]',
    suggestion_item='.q-box .puppeteer_test_selector_result',
    question_card='.qu-mt--small .qu-pl--tiny',
    question_item='.qu-mt--small .qu-mb--tiny',
    title_fallbacks=(
        '.puppeteer_test_question_title span',
        '.puppeteer_test_question_title',
        'a span',
        'a',
    ),
)

SELECTOR_SETS = {
    QUORA_SELECTORS.site: QUORA_SELECTORS,
}
