"""
Tests for bounded waits.
"""

import asyncio
import time

from qa_scraper.scraper.selectors import QUORA_SELECTORS as S
from qa_scraper.utils.dom import has_search_form
from qa_scraper.utils.waits import _first_success, wait_for_condition, wait_for_redirect_and_ready
from tests.conftest import FakePage, fixture_html


def test_wait_for_condition_true_immediately():
    page = FakePage(fixture_html("search_form.html"))
    assert asyncio.run(wait_for_condition(page, lambda doc: has_search_form(S.search_input, doc), 50, 5))


def test_wait_for_condition_times_out():
    page = FakePage("<div></div>")
    started = time.monotonic()
    result = asyncio.run(wait_for_condition(page, lambda doc: has_search_form(S.search_input, doc), 50, 5))
    assert result is False
    assert time.monotonic() - started < 2


def test_wait_for_condition_sees_late_change():
    page = FakePage("<div></div>")

    async def run():
        async def late_load():
            await asyncio.sleep(0.02)
            page.load(fixture_html("search_form.html"))

        loader = asyncio.ensure_future(late_load())
        found = await wait_for_condition(page, lambda doc: has_search_form(S.search_input, doc), 500, 5)
        await loader
        return found

    assert asyncio.run(run())


def test_first_success_returns_on_first_completed():
    async def fail():
        raise RuntimeError("nope")

    async def slow():
        await asyncio.sleep(5)

    async def quick():
        await asyncio.sleep(0.01)

    started = time.monotonic()
    assert asyncio.run(_first_success(fail(), slow(), quick()))
    assert time.monotonic() - started < 2


def test_first_success_all_fail():
    async def fail():
        raise RuntimeError("nope")

    assert asyncio.run(_first_success(fail(), fail())) is False


def test_wait_for_redirect_tolerates_no_navigation():
    page = FakePage("<div></div>", url="https://www.quora.com/")
    page.ready_state_fails = True
    # neither signal fires and readyState never completes; still returns
    asyncio.run(wait_for_redirect_and_ready(page, 30, ready_state_timeout_ms=30))
    assert page.url == "https://www.quora.com/"


def test_wait_for_redirect_returns_on_ready_selector():
    page = FakePage(fixture_html("questions.html"), url="https://www.quora.com/")

    async def run():
        async def redirect():
            await asyncio.sleep(0.01)
            page.url = "https://www.quora.com/topic/Growth-Hacking"

        mover = asyncio.ensure_future(redirect())
        await wait_for_redirect_and_ready(page, 200, ready_selectors=['.missing', S.question_item])
        await mover

    asyncio.run(run())
    assert page.url.endswith("/topic/Growth-Hacking")


def test_wait_for_redirect_with_finished_navigation_returns_quickly():
    page = FakePage("<div></div>", url="https://www.quora.com/topic/Growth-Hacking")
    started = time.monotonic()
    asyncio.run(wait_for_redirect_and_ready(page, 3000, start_url="https://www.quora.com/"))
    assert time.monotonic() - started < 1
