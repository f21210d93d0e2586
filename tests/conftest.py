"""
Shared test doubles.

FakePage implements the slice of the Playwright async Page API the scraper
uses, backed by a BeautifulSoup tree, so adapter and action code can run
against the packaged HTML fixtures without a browser.
"""

import asyncio
import copy
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from qa_scraper.scraper.routes import QUORA_FIXTURES

FAST_SETTINGS = {
    'timeouts': {
        'login_inputs': 60,
        'submit_enabled': 60,
        'post_login_navigation': 60,
        'search_form': 60,
        'suggestions': 60,
        'redirect': 60,
        'ready_state': 60,
        'question_list': 60,
        'element_visible': 60,
        'click': 60,
        'page_load': 200,
        'poll_interval': 5
    },
    'collection': {
        'expand_settle_ms': 0,
        'no_progress_pause_ms': 0,
        'scroll_pause_ms': 0,
        'scroll_ratio': 0.9,
        'max_idle_rounds': 3
    },
    'typing': {
        'delay_ms': 0
    }
}


def fixture_html(name: str) -> str:
    return (QUORA_FIXTURES / name).read_text(encoding='utf-8')


class FakeKeyboard:
    def __init__(self, page):
        self.page = page

    async def type(self, text, delay=None):
        if self.page.keyboard_fails:
            raise PlaywrightError("keyboard unavailable")
        self.page.typed.append(text)
        focused = self.page.focused
        if focused is not None:
            focused['value'] = focused.get('value', '') + text

    async def press(self, key):
        if self.page.keyboard_fails:
            raise PlaywrightError("keyboard unavailable")
        self.page.pressed.append(key)
        if self.page.on_key:
            self.page.on_key(self.page, key)


class FakeElementHandle:
    def __init__(self, page, tag):
        self.page = page
        self.tag = tag

    async def click(self, timeout=None):
        if self.page.click_fails:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")
        self.page.clicked.append(self.tag)
        if self.page.on_click:
            self.page.on_click(self.page, self.tag)

    async def dispatch_event(self, event_type):
        if self.page.dispatch_fails:
            raise PlaywrightError("Element is not attached to the DOM")
        self.page.dispatched.append(self.tag)
        if self.page.on_click:
            self.page.on_click(self.page, self.tag)

    async def inner_text(self):
        return self.tag.get_text()

    async def text_content(self):
        return self.tag.get_text()

    async def inner_html(self):
        return self.tag.decode_contents()

    async def focus(self):
        self.page.focused = self.tag

    async def scroll_into_view_if_needed(self, timeout=None):
        return None


class FakePage:
    """
    In-memory stand-in for a Playwright page.

    ``routes`` maps URLs to markup served by ``goto``. Hooks let a test
    react to clicks, key presses and scrolls, e.g. to swap the document
    or append lazily loaded items.
    """

    def __init__(self, html="", url="about:blank", routes=None):
        self.url = url
        self.routes = dict(routes or {})
        self.main_frame = object()
        self.keyboard = FakeKeyboard(self)
        self.doc = BeautifulSoup(html, "html.parser")
        self.focused = None
        self.typed = []
        self.pressed = []
        self.clicked = []
        self.dispatched = []
        self.visited = []
        self.scrolls = []
        self.navigations = 0
        self.click_fails = False
        self.dispatch_fails = False
        self.keyboard_fails = False
        self.ready_state_fails = False
        self.on_click = None
        self.on_key = None
        self.on_scroll = None

    def load(self, html, url=None):
        self.doc = BeautifulSoup(html, "html.parser")
        self.focused = None
        if url is not None:
            self.url = url
        self.navigations += 1

    async def content(self):
        return str(self.doc)

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)
        if url in self.routes:
            self.load(self.routes[url], url)
        else:
            self.url = url
            self.navigations += 1

    async def set_content(self, html, wait_until=None, timeout=None):
        self.load(html)

    async def query_selector(self, selector):
        tag = self.doc.select_one(selector)
        return FakeElementHandle(self, tag) if tag is not None else None

    async def query_selector_all(self, selector):
        return [FakeElementHandle(self, tag) for tag in self.doc.select(selector)]

    async def wait_for_selector(self, selector, state=None, timeout=None):
        handle = await self.query_selector(selector)
        if handle is None:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")
        return handle

    async def evaluate(self, script, arg=None):
        self.scrolls.append(arg)
        if self.on_scroll:
            self.on_scroll(self, len(self.scrolls))

    async def wait_for_function(self, script, timeout=None):
        if self.ready_state_fails:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")
        return True

    async def _poll(self, check, timeout):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + (timeout or 0) / 1000
        while not check():
            if loop.time() >= deadline:
                raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")
            await asyncio.sleep(0.002)

    async def wait_for_url(self, url, wait_until=None, timeout=None):
        matches = url if callable(url) else (lambda current: current == url)
        await self._poll(lambda: matches(self.url), timeout)

    async def wait_for_event(self, event, predicate=None, timeout=None):
        start = self.navigations
        await self._poll(lambda: self.navigations > start, timeout)
        return self.main_frame


def append_items(page, count, prefix="Lazy"):
    """Append ``count`` question items to the topic feed of a questions page."""
    feed = page.doc.select_one('.topic-feed')
    offset = len(page.doc.select('.qu-mt--small'))
    for i in range(count):
        n = offset + i
        snippet = (
            f'<div class="qu-mt--small"><div class="qu-mb--tiny">'
            f'<div class="puppeteer_test_question_title">'
            f'<a href="https://www.quora.com/{prefix}-question-{n}"><span>{prefix} question {n}?</span></a>'
            f'</div></div></div>'
        )
        feed.append(BeautifulSoup(snippet, "html.parser"))


@pytest.fixture
def fast_settings():
    return copy.deepcopy(FAST_SETTINGS)


@pytest.fixture
def fake_page():
    return FakePage()


@pytest.fixture
def fixtures_dir() -> Path:
    return QUORA_FIXTURES
